"""Typer CLI for warehouse slot allocation.

Every command loads a warehouse configuration file into in-memory stores;
``commit`` therefore only affects the stores of that one invocation.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from slotting.application import (
    CommitInput,
    RecommendationInput,
    ServiceFactory,
)
from slotting.application.config import ConfigError
from slotting.cli.commands import display_load_error, validate_command
from slotting.domain import AllocationError

app = typer.Typer(
    name="slotting",
    help="Recommend and commit pallet locations in a warehouse.",
)

# Register validate command
app.command(name="validate")(validate_command)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Warehouse slot allocation."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


def _load_factory(config_file: Path) -> ServiceFactory:
    try:
        return ServiceFactory.from_path(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)


def _warehouse(factory: ServiceFactory, warehouse: str | None) -> str:
    warehouse_id = warehouse or factory.warehouse_id
    if not warehouse_id:
        typer.echo("Error: no warehouse id given or configured", err=True)
        raise typer.Exit(code=1)
    return warehouse_id


ConfigArg = Annotated[
    Path, typer.Argument(help="Path to the JSON warehouse configuration")
]
WarehouseOpt = Annotated[
    str | None,
    typer.Option("--warehouse", "-w", help="Warehouse id (default: from config)"),
]
PalletsOpt = Annotated[
    int | None, typer.Option("--pallets", "-p", help="Pallets to place")
]
CartonsOpt = Annotated[
    int | None,
    typer.Option("--cartons", "-c", help="Carton quantity, converted into pallets"),
]


@app.command()
def recommend(
    config_file: ConfigArg,
    product: Annotated[str, typer.Argument(help="Product code")],
    pallets: PalletsOpt = None,
    cartons: CartonsOpt = None,
    warehouse: WarehouseOpt = None,
) -> None:
    """Show where a product's pallets would go, without storing anything."""
    factory = _load_factory(config_file)
    request = RecommendationInput(
        warehouse_id=_warehouse(factory, warehouse),
        product_code=product,
        pallets_needed=pallets,
        cartons=cartons,
    )
    result = factory.create_recommend_command().execute(request)

    if not result.success:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(code=1)

    formatter = factory.get_plan_formatter()
    typer.echo(
        formatter.format(
            result.placements,
            result.remaining_unplaced,
            title=f"RECOMMENDATION: {product} ({result.pallets_needed} pallet(s))",
        )
    )


@app.command()
def commit(
    config_file: ConfigArg,
    product: Annotated[str, typer.Argument(help="Product code")],
    batch: Annotated[
        str, typer.Option("--batch", "-b", help="Batch code, YYMMDDXXXX")
    ],
    pallets: PalletsOpt = None,
    cartons: CartonsOpt = None,
    expiry: Annotated[
        datetime | None,
        typer.Option(
            "--expiry",
            formats=["%Y-%m-%d"],
            help="Expiry date (default: from the batch code)",
        ),
    ] = None,
    locations: Annotated[
        list[str] | None,
        typer.Option(
            "--location", "-l", help="Planned cell, e.g. A-L1-B2-P3 (repeatable)"
        ),
    ] = None,
    manual: Annotated[
        list[str] | None,
        typer.Option("--manual", "-m", help="Row address, e.g. A-L1-B2 (repeatable)"),
    ] = None,
    warehouse: WarehouseOpt = None,
) -> None:
    """Store a product's pallets and print the transaction code."""
    factory = _load_factory(config_file)
    request = CommitInput(
        warehouse_id=_warehouse(factory, warehouse),
        product_code=product,
        pallets_needed=pallets,
        cartons=cartons,
        batch_code=batch,
        expiry_date=expiry.date() if expiry else None,
        planned_locations=locations or None,
        manual_locations=manual or None,
    )
    result = factory.create_commit_command().execute(request)

    if not result.success:
        reason = result.reason.value if result.reason else "unknown"
        typer.echo(f"Error ({reason}): {result.message}", err=True)
        if result.occupied:
            typer.echo(
                f"  Occupied since planning: {', '.join(str(k) for k in result.occupied)}",
                err=True,
            )
        if result.rolled_back is False:
            typer.echo("  Rollback incomplete; check stored cells", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Transaction: {result.transaction_code}")
    typer.echo(factory.get_plan_formatter().format(result.placements, title="STORED"))


@app.command()
def check(
    config_file: ConfigArg,
    locations: Annotated[
        list[str], typer.Argument(help="Cells to check, e.g. A-L1-B2-P3")
    ],
    warehouse: WarehouseOpt = None,
) -> None:
    """Check whether cells are free."""
    factory = _load_factory(config_file)
    result = factory.create_availability_command().execute(
        _warehouse(factory, warehouse), locations
    )
    if not result.success:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(code=1)
    for location, free in result.locations.items():
        typer.echo(f"{location:<16} {'free' if free else 'occupied'}")


@app.command()
def layout(
    config_file: ConfigArg,
    cluster: Annotated[str, typer.Argument(help="Cluster letter")],
    warehouse: WarehouseOpt = None,
) -> None:
    """Show effective rows and levels per lane of a cluster."""
    factory = _load_factory(config_file)
    try:
        result = factory.create_layout_query().execute(
            _warehouse(factory, warehouse), cluster
        )
    except AllocationError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)

    typer.echo(factory.get_cluster_map_formatter().format(result.cluster, result.lanes))


if __name__ == "__main__":
    app()
