"""Domain entities for warehouse slot allocation."""

from dataclasses import dataclass, field
from datetime import date, datetime

from .value_objects import CellKey, IntRange, PlacementPhase, StockStatus


@dataclass(frozen=True)
class ClusterConfig:
    """Default capacity of one cluster.

    Attributes:
        cluster: Cluster letter, e.g. "A".
        default_lane_count: Number of lanes in the cluster.
        default_row_count: Rows per lane unless overridden.
        default_level_capacity: Levels per row unless overridden.
        id: Identifier referenced by overrides. Defaults to the cluster letter.
        is_active: Inactive clusters are ignored by the allocation core.
    """

    cluster: str
    default_lane_count: int
    default_row_count: int
    default_level_capacity: int
    id: str = ""
    is_active: bool = True

    def __post_init__(self) -> None:
        if not self.cluster:
            raise ValueError("Cluster letter is required")
        if self.default_lane_count < 1 or self.default_row_count < 1:
            raise ValueError("Lane and row counts must be at least 1")
        if self.default_level_capacity < 1:
            raise ValueError("Level capacity must be at least 1")
        if not self.id:
            object.__setattr__(self, "id", self.cluster)


@dataclass(frozen=True)
class CellOverride:
    """Exception to a cluster's defaults for a lane/row range.

    A null ``row_range`` applies the override to every row of the lanes
    in ``lane_range``.
    """

    cluster_config_id: str
    lane_range: IntRange
    row_range: IntRange | None = None
    custom_row_count: int | None = None
    custom_level_capacity: int | None = None
    is_transit_area: bool = False
    is_disabled: bool = False
    created_at: datetime | None = None
    sequence: int = 0
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.custom_row_count is not None and self.custom_row_count < 1:
            raise ValueError("Custom row count must be at least 1")
        if self.custom_level_capacity is not None and self.custom_level_capacity < 1:
            raise ValueError("Custom level capacity must be at least 1")

    def covers_lane(self, lane: int) -> bool:
        return lane in self.lane_range

    def covers_cell(self, lane: int, row: int) -> bool:
        """Check whether the override's scope contains (lane, row)."""
        if lane not in self.lane_range:
            return False
        return self.row_range is None or row in self.row_range


@dataclass(frozen=True)
class Product:
    """Product master data needed for placement."""

    id: str
    code: str
    cartons_per_pallet: int
    name: str = ""
    default_cluster: str | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.cartons_per_pallet < 1:
            raise ValueError("Cartons per pallet must be at least 1")


@dataclass(frozen=True)
class ProductHome:
    """Preferred storage zone for a product.

    Attributes:
        product_id: Product this home belongs to.
        cluster: Cluster letter of the zone.
        lane_range: Lanes of the zone.
        row_range: Rows of the zone, clamped per lane to its effective row count.
        max_pallet_per_location: Upper bound on levels used per row.
        priority: Lower values are searched first.
        sequence: Creation order, used to break priority ties.
    """

    product_id: str
    cluster: str
    lane_range: IntRange
    row_range: IntRange
    max_pallet_per_location: int = 3
    priority: int = 0
    sequence: int = 0
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.max_pallet_per_location < 1:
            raise ValueError("Max pallet per location must be at least 1")


@dataclass(frozen=True)
class Placement:
    """One cell assignment within a plan."""

    key: CellKey
    phase: PlacementPhase
    carton_qty: int = 0
    is_partial: bool = False

    @property
    def cluster(self) -> str:
        return self.key.cluster

    @property
    def lane(self) -> int:
        return self.key.lane

    @property
    def row(self) -> int:
        return self.key.row

    @property
    def level(self) -> int:
        return self.key.level

    @property
    def status(self) -> StockStatus:
        return StockStatus.RECEH if self.is_partial else StockStatus.RELEASE


@dataclass(frozen=True)
class PlacementResult:
    """Ordered outcome of one planning pass.

    Home placements always precede transit placements.
    """

    placements: tuple[Placement, ...]
    pallets_needed: int

    @property
    def total_found(self) -> int:
        return len(self.placements)

    @property
    def remaining_unplaced(self) -> int:
        return max(self.pallets_needed - self.total_found, 0)

    @property
    def is_full(self) -> bool:
        return self.remaining_unplaced > 0

    @property
    def keys(self) -> list[CellKey]:
        return [placement.key for placement in self.placements]


@dataclass(frozen=True)
class CellPayload:
    """Data written to a single cell on commit."""

    product_id: str
    carton_qty: int
    status: StockStatus
    batch_code: str | None = None
    expiry_date: date | None = None
    transaction_code: str | None = None


@dataclass
class InboundTransaction:
    """Record of one committed placement session."""

    transaction_code: str
    warehouse_id: str
    product_id: str
    batch_code: str | None
    expiry_date: date | None
    total_cartons: int
    placements: list[Placement] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
