"""Application commands (use cases) for slot allocation.

Every command catches AllocationError at its boundary and returns a
structured output; web and CLI callers never see domain exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Callable, Iterable

from slotting.application.config.schema import PlannerSettings
from slotting.domain import (
    AllocationError,
    CellKey,
    FailureReason,
    InboundTransaction,
    InsufficientCapacityError,
    NotFoundError,
    Placement,
    PlacementPhase,
    Product,
    RowAddress,
    SessionState,
    ValidationError,
    WriteError,
)
from slotting.domain.services import (
    BatchCode,
    CartonSplit,
    CommitTemplate,
    ConfigResolver,
    Deadline,
    HomeRegistry,
    OccupancyOracle,
    PlacementPlanner,
    PlacementSession,
    ReservationCommitter,
    parse_batch_code,
    split_cartons,
)

from .dtos import (
    AvailabilityOutput,
    ClusterLayoutOutput,
    CommitInput,
    CommitOutput,
    LaneCapacity,
    RecommendationInput,
    RecommendationOutput,
)

if TYPE_CHECKING:
    from slotting.contracts.protocols import (
        LockProvider,
        OccupancyRepository,
        TransactionLog,
        WarehouseCatalog,
    )

logger = logging.getLogger(__name__)

TRANSACTION_PREFIX = "INB"

_REASONS = {reason.value: reason for reason in FailureReason}


def format_transaction_code(day: date, sequence: int) -> str:
    """Render a transaction code, e.g. ``INB-20260131-0007``."""
    return f"{TRANSACTION_PREFIX}-{day:%Y%m%d}-{sequence:04d}"


def failure_reason(error: AllocationError) -> FailureReason:
    """Map a domain exception to the reason reported to callers."""
    return _REASONS.get(error.error_type, FailureReason.VALIDATION)


@dataclass(frozen=True)
class WarehouseServices:
    """Planner services bound to one warehouse's configuration."""

    warehouse_id: str
    resolver: ConfigResolver
    homes: HomeRegistry
    planner: PlacementPlanner

    def snapshot_clusters(self, product: Product) -> set[str]:
        """Clusters a plan for ``product`` can touch."""
        clusters = set(self.homes.clusters_for(product.id))
        clusters.update(cluster for cluster, _ in self.resolver.transit_overrides())
        return clusters


def build_services(
    catalog: "WarehouseCatalog", warehouse_id: str, strict: bool = True
) -> WarehouseServices:
    """Read a warehouse's configuration and wire the planner to it.

    Raises:
        ConfigurationError: If overrides reference unknown clusters.
    """
    resolver = ConfigResolver(
        catalog.cluster_configs(warehouse_id),
        catalog.cell_overrides(warehouse_id),
        strict=strict,
    )
    homes = HomeRegistry(
        catalog.product_homes(warehouse_id), catalog.products(warehouse_id)
    )
    return WarehouseServices(
        warehouse_id=warehouse_id,
        resolver=resolver,
        homes=homes,
        planner=PlacementPlanner(resolver, homes),
    )


class _WarehouseCommand:
    """Shared lookups of the placement commands."""

    def __init__(
        self,
        catalog: "WarehouseCatalog",
        repository: "OccupancyRepository",
        settings: PlannerSettings | None = None,
    ) -> None:
        self.catalog = catalog
        self.repository = repository
        self.settings = settings or PlannerSettings()
        self.oracle = OccupancyOracle(repository)

    def _services(self, warehouse_id: str) -> WarehouseServices:
        return build_services(
            self.catalog, warehouse_id, strict=self.settings.strict_clusters
        )

    def _product(self, warehouse_id: str, code: str) -> Product:
        product = self.catalog.find_product(warehouse_id, code)
        if product is None:
            raise NotFoundError(
                f"Product '{code}' not found in warehouse {warehouse_id}", code
            )
        return product

    def _split(
        self, product: Product, pallets_needed: int | None, cartons: int | None
    ) -> CartonSplit:
        if cartons is not None:
            return split_cartons(
                cartons, product.cartons_per_pallet, self.settings.remainder_threshold
            )
        if pallets_needed is None or pallets_needed <= 0:
            raise ValidationError("Pallets needed must be greater than zero")
        return CartonSplit.for_pallets(pallets_needed, product.cartons_per_pallet)


class RecommendPlacementCommand(_WarehouseCommand):
    """Read-only query: where would these pallets go right now?"""

    def execute(self, request: RecommendationInput) -> RecommendationOutput:
        errors = request.validate()
        if errors:
            return RecommendationOutput(
                success=False,
                error="; ".join(errors),
                reason=FailureReason.VALIDATION,
            )

        try:
            services = self._services(request.warehouse_id)
            product = self._product(request.warehouse_id, request.product_code)
            split = self._split(product, request.pallets_needed, request.cartons)
            snapshot = self.oracle.snapshot(
                request.warehouse_id, services.snapshot_clusters(product)
            )
            plan = services.planner.plan(product, split.pallets_needed, snapshot, split)
        except AllocationError as e:
            logger.warning(
                f"Recommendation for {request.product_code} rejected: {e.message}"
            )
            return RecommendationOutput(
                success=False, error=e.message, reason=failure_reason(e)
            )

        return RecommendationOutput(
            success=True,
            placements=list(plan.placements),
            pallets_needed=plan.pallets_needed,
            remaining_unplaced=plan.remaining_unplaced,
            split=split,
        )


class CommitPlacementCommand(_WarehouseCommand):
    """Plans (or accepts) locations and writes them in one placement session.

    Args:
        catalog: Warehouse configuration.
        repository: Occupancy store written to.
        transactions: Log that numbers and records committed transactions.
        locks: Per-cluster lock provider held while validating and writing.
        settings: Planner settings (spare cells, timeout, remainder threshold).
        clock: Source of the current time, used for transaction codes.
    """

    def __init__(
        self,
        catalog: "WarehouseCatalog",
        repository: "OccupancyRepository",
        transactions: "TransactionLog",
        locks: "LockProvider | None" = None,
        settings: PlannerSettings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(catalog, repository, settings)
        self.transactions = transactions
        self.locks = locks
        self.clock = clock

    def execute(self, request: CommitInput) -> CommitOutput:
        """Run one placement session to COMMITTED or FAILED."""
        session = PlacementSession(request.warehouse_id, request.product_code)
        deadline = Deadline(self.settings.session_timeout_seconds)

        errors = request.validate()
        if errors:
            return self._failed(session, ValidationError("; ".join(errors)))

        try:
            product, placements, template, total_cartons = self._run(
                request, session, deadline
            )
        except AllocationError as e:
            return self._failed(session, e)

        session.advance(SessionState.COMMITTED)
        assert template.transaction_code is not None
        self.transactions.record(
            InboundTransaction(
                transaction_code=template.transaction_code,
                warehouse_id=request.warehouse_id,
                product_id=product.id,
                batch_code=template.batch_code,
                expiry_date=template.expiry_date,
                total_cartons=total_cartons,
                placements=list(placements),
                created_at=self.clock(),
            )
        )
        return CommitOutput(
            success=True,
            message=(
                f"Stored {len(placements)} pallet(s) of {product.code} "
                f"under {template.transaction_code}"
            ),
            state=session.state,
            transaction_code=template.transaction_code,
            placements=list(placements),
        )

    def _run(
        self, request: CommitInput, session: PlacementSession, deadline: Deadline
    ) -> tuple[Product, list[Placement], CommitTemplate, int]:
        warehouse_id = request.warehouse_id
        services = self._services(warehouse_id)
        product = self._product(warehouse_id, request.product_code)
        split = self._split(product, request.pallets_needed, request.cartons)
        assert request.batch_code is not None
        batch = parse_batch_code(request.batch_code)
        if batch.is_expired(self.clock().date()):
            logger.warning(
                f"Batch {batch.raw} of {product.code} expired on {batch.expiry_date}"
            )

        committer = ReservationCommitter(self.repository, services.resolver, self.locks)

        if request.mode == "manual":
            assert request.manual_locations is not None
            addresses = [RowAddress.parse(raw) for raw in request.manual_locations]
            template = self._template(warehouse_id, product, batch, request.expiry_date)
            placements = committer.reserve_manual(
                warehouse_id, addresses, split, template, session, deadline
            )
            return product, placements, template, split.total_cartons

        if request.mode == "explicit":
            assert request.planned_locations is not None
            planned = self._explicit(services, request.planned_locations)
        else:
            deadline.check("planning")
            snapshot = self.oracle.snapshot(
                warehouse_id, services.snapshot_clusters(product)
            )
            plan = services.planner.plan(
                product,
                split.pallets_needed,
                snapshot,
                split,
                spare_cells=self.settings.commit_spare_cells,
            )
            if plan.is_full:
                raise InsufficientCapacityError(
                    required=split.pallets_needed,
                    available=plan.total_found,
                    message=(
                        f"Warehouse full: {plan.total_found} free location(s) "
                        f"for {split.pallets_needed} pallet(s)"
                    ),
                )
            planned = list(plan.placements)

        template = self._template(warehouse_id, product, batch, request.expiry_date)
        placements = committer.commit(
            warehouse_id,
            planned,
            split.pallets_needed,
            split,
            template,
            session,
            deadline,
        )
        return product, placements, template, split.total_cartons

    def _explicit(
        self, services: WarehouseServices, locations: Iterable[str]
    ) -> list[Placement]:
        """Parse caller-supplied cells once; any bad entry aborts the submission."""
        keys = [CellKey.parse(raw) for raw in locations]
        seen: set[CellKey] = set()
        planned = []
        for key in keys:
            if key in seen:
                raise ValidationError(f"Location {key} is listed twice")
            seen.add(key)
            if services.resolver.is_disabled(key.cluster, key.lane, key.row):
                raise ValidationError(f"Location {key} is disabled")
            if key.level > services.resolver.effective_level_capacity(
                key.cluster, key.lane, key.row
            ):
                raise ValidationError(f"Location {key} is above the row's capacity")
            phase = (
                PlacementPhase.IN_TRANSIT
                if services.resolver.is_transit_cell(key.cluster, key.lane, key.row)
                else PlacementPhase.PRIMARY_HOME
            )
            planned.append(Placement(key, phase))
        return planned

    def _template(
        self,
        warehouse_id: str,
        product: Product,
        batch: BatchCode,
        expiry_date: date | None,
    ) -> CommitTemplate:
        """Reserve the transaction code; an explicit expiry beats the batch's."""
        day = self.clock().date()
        sequence = self.transactions.next_sequence(warehouse_id, day)
        return CommitTemplate(
            product_id=product.id,
            transaction_code=format_transaction_code(day, sequence),
            batch_code=batch.raw,
            expiry_date=expiry_date or batch.expiry_date,
        )

    def _failed(self, session: PlacementSession, error: AllocationError) -> CommitOutput:
        reason = failure_reason(error)
        session.fail(reason)
        output = CommitOutput(
            success=False,
            message=error.message,
            state=session.state,
            reason=reason,
        )
        if isinstance(error, InsufficientCapacityError):
            output.occupied = list(error.occupied)
            output.remaining_unplaced = error.shortfall
        elif isinstance(error, WriteError):
            output.rolled_back = error.rolled_back
        return output


class CheckAvailabilityCommand:
    """Pre-submit check: is each of these cells still free?"""

    def __init__(self, repository: "OccupancyRepository") -> None:
        self.oracle = OccupancyOracle(repository)

    def execute(self, warehouse_id: str, locations: list[str]) -> AvailabilityOutput:
        if not warehouse_id:
            return AvailabilityOutput(
                success=False,
                error="Warehouse id is required",
                reason=FailureReason.VALIDATION,
            )
        try:
            keys = [CellKey.parse(raw) for raw in locations]
        except AllocationError as e:
            return AvailabilityOutput(
                success=False, error=e.message, reason=failure_reason(e)
            )
        report = self.oracle.check(warehouse_id, keys)
        free = set(report.available)
        return AvailabilityOutput(
            success=True,
            locations={str(key): key in free for key in keys},
        )


class DescribeClusterQuery:
    """Effective lane/row/level capacity of one cluster."""

    def __init__(
        self, catalog: "WarehouseCatalog", settings: PlannerSettings | None = None
    ) -> None:
        self.catalog = catalog
        self.settings = settings or PlannerSettings()

    def execute(self, warehouse_id: str, cluster: str) -> ClusterLayoutOutput:
        """Describe ``cluster``.

        Raises:
            NotFoundError: If the cluster has no active configuration.
        """
        resolver = build_services(
            self.catalog, warehouse_id, strict=self.settings.strict_clusters
        ).resolver
        if resolver.cluster_config(cluster) is None:
            raise NotFoundError(
                f"Cluster '{cluster}' is not configured in warehouse {warehouse_id}",
                cluster,
            )

        lanes = []
        for lane in range(1, resolver.lane_count(cluster) + 1):
            rows = range(1, resolver.effective_row_count(cluster, lane) + 1)
            lanes.append(
                LaneCapacity(
                    lane=lane,
                    row_count=len(rows),
                    level_capacities=tuple(
                        resolver.effective_level_capacity(cluster, lane, row)
                        for row in rows
                    ),
                    disabled_rows=tuple(
                        resolver.is_disabled(cluster, lane, row) for row in rows
                    ),
                    is_transit=resolver.is_transit_lane(cluster, lane),
                )
            )
        return ClusterLayoutOutput(cluster=cluster, lanes=lanes)
