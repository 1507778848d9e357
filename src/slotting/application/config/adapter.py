"""Conversion of configuration models into domain objects."""

from slotting.application.config.schema import (
    CellOverrideConfig,
    ProductHomeConfig,
    RangeConfig,
    WarehouseConfiguration,
)
from slotting.domain import (
    CellKey,
    CellOverride,
    ClusterConfig,
    IntRange,
    Product,
    ProductHome,
)
from slotting.infrastructure.memory import InMemoryCatalog, WarehouseLayout


def _range(config: RangeConfig) -> IntRange:
    return IntRange(config.start, config.end)


def _cluster_config_id(config: WarehouseConfiguration, ref: str) -> str:
    """Map an override's cluster reference (letter or id) to a config id."""
    for cluster in config.clusters:
        if ref == cluster.id:
            return ref
        if ref == cluster.cluster:
            return cluster.id or cluster.cluster
    return ref


def config_to_overrides(config: WarehouseConfiguration) -> list[CellOverride]:
    """Convert overrides, numbering them in declaration order."""

    def convert(index: int, override: CellOverrideConfig) -> CellOverride:
        return CellOverride(
            cluster_config_id=_cluster_config_id(config, override.cluster),
            lane_range=_range(override.lanes),
            row_range=_range(override.rows) if override.rows else None,
            custom_row_count=override.custom_row_count,
            custom_level_capacity=override.custom_level_capacity,
            is_transit_area=override.is_transit_area,
            is_disabled=override.is_disabled,
            created_at=override.created_at,
            sequence=index,
            notes=override.notes,
        )

    return [convert(i, o) for i, o in enumerate(config.overrides)]


def config_to_products(config: WarehouseConfiguration) -> list[Product]:
    return [
        Product(
            id=product.id or product.code,
            code=product.code,
            name=product.name,
            cartons_per_pallet=product.cartons_per_pallet,
            default_cluster=product.default_cluster,
            is_active=product.is_active,
        )
        for product in config.products
    ]


def config_to_homes(config: WarehouseConfiguration) -> list[ProductHome]:
    """Convert homes; product codes are resolved to product ids."""
    ids = {p.code: p.id or p.code for p in config.products}

    def convert(index: int, home: ProductHomeConfig) -> ProductHome:
        return ProductHome(
            product_id=ids[home.product],
            cluster=home.cluster,
            lane_range=_range(home.lanes),
            row_range=_range(home.rows),
            max_pallet_per_location=home.max_pallet_per_location,
            priority=home.priority,
            sequence=index,
            is_active=home.is_active,
        )

    return [convert(i, h) for i, h in enumerate(config.homes)]


def config_to_layout(config: WarehouseConfiguration) -> WarehouseLayout:
    """Build the full domain layout of the configured warehouse."""
    clusters = [
        ClusterConfig(
            cluster=c.cluster,
            default_lane_count=c.default_lane_count,
            default_row_count=c.default_row_count,
            default_level_capacity=c.default_level_capacity,
            id=c.id or c.cluster,
            is_active=c.is_active,
        )
        for c in config.clusters
    ]
    return WarehouseLayout(
        clusters=clusters,
        overrides=config_to_overrides(config),
        products=config_to_products(config),
        homes=config_to_homes(config),
    )


def config_to_catalog(config: WarehouseConfiguration) -> InMemoryCatalog:
    return InMemoryCatalog({config.warehouse_id: config_to_layout(config)})


def config_to_occupied(config: WarehouseConfiguration) -> list[CellKey]:
    """Parse the initially occupied cells."""
    return [CellKey.parse(raw) for raw in config.occupied]
