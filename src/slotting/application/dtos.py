"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from slotting.domain import (
    CellKey,
    FailureReason,
    Placement,
    SessionState,
)
from slotting.domain.services import CartonSplit


def _quantity_errors(pallets_needed: int | None, cartons: int | None) -> list[str]:
    errors: list[str] = []
    if pallets_needed is None and cartons is None:
        errors.append("Either pallets needed or a carton quantity is required")
    elif pallets_needed is not None and cartons is not None:
        errors.append("Give pallets needed or a carton quantity, not both")
    elif pallets_needed is not None and pallets_needed <= 0:
        errors.append("Pallets needed must be greater than zero")
    elif cartons is not None and cartons <= 0:
        errors.append("Carton quantity must be greater than zero")
    return errors


@dataclass
class RecommendationInput:
    """Input DTO for a read-only placement recommendation."""

    warehouse_id: str
    product_code: str
    pallets_needed: int | None = None
    cartons: int | None = None

    def validate(self) -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        if not self.warehouse_id:
            errors.append("Warehouse id is required")
        if not self.product_code:
            errors.append("Product code is required")
        errors.extend(_quantity_errors(self.pallets_needed, self.cartons))
        return errors


@dataclass
class RecommendationOutput:
    """Output DTO of a recommendation.

    A plan that could not place every pallet is still successful; callers
    check ``is_full`` and ``remaining_unplaced``.

    Attributes:
        success: False when the request was rejected.
        placements: Planned cells, home placements before transit placements.
        pallets_needed: Pallets requested, after carton conversion.
        remaining_unplaced: Pallets that found no cell.
        split: Carton breakdown used for per-cell quantities.
        timestamp: When the recommendation was computed.
        error: Message when ``success`` is False.
        reason: Failure category when ``success`` is False.
    """

    success: bool
    placements: list[Placement] = field(default_factory=list)
    pallets_needed: int = 0
    remaining_unplaced: int = 0
    split: CartonSplit | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    error: str | None = None
    reason: FailureReason | None = None

    @property
    def total_found(self) -> int:
        return len(self.placements)

    @property
    def is_full(self) -> bool:
        return self.remaining_unplaced > 0


@dataclass
class CommitInput:
    """Input DTO for committing a placement.

    Exactly one placement mode applies:

    - auto: neither ``planned_locations`` nor ``manual_locations`` is given;
      a fresh plan is computed and committed.
    - explicit: ``planned_locations`` holds cell strings ("A-L1-B2-P3") from
      an earlier recommendation.
    - manual: ``manual_locations`` holds row addresses ("A-L1-B2"), each of
      which receives one pallet on its first free level.
    """

    warehouse_id: str
    product_code: str
    pallets_needed: int | None = None
    cartons: int | None = None
    batch_code: str | None = None
    expiry_date: date | None = None
    planned_locations: list[str] | None = None
    manual_locations: list[str] | None = None

    def validate(self) -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        if not self.warehouse_id:
            errors.append("Warehouse id is required")
        if not self.product_code:
            errors.append("Product code is required")
        errors.extend(_quantity_errors(self.pallets_needed, self.cartons))
        if not self.batch_code:
            errors.append("Batch code is required")
        if self.planned_locations is not None and self.manual_locations is not None:
            errors.append("Give planned locations or manual locations, not both")
        if self.planned_locations is not None and not self.planned_locations:
            errors.append("Planned locations cannot be empty")
        if self.manual_locations is not None and not self.manual_locations:
            errors.append("Manual locations cannot be empty")
        return errors

    @property
    def mode(self) -> str:
        if self.manual_locations is not None:
            return "manual"
        if self.planned_locations is not None:
            return "explicit"
        return "auto"


@dataclass
class CommitOutput:
    """Output DTO of a commit session.

    Attributes:
        success: Whether the session reached COMMITTED.
        message: Human-readable outcome.
        state: Terminal session state.
        transaction_code: Code of the recorded transaction on success.
        reason: Failure category when ``success`` is False.
        placements: Cells written, in order.
        occupied: Planned cells found occupied at commit time.
        remaining_unplaced: Pallets that could not be committed.
        rolled_back: For write failures, whether earlier writes were undone.
    """

    success: bool
    message: str
    state: SessionState
    transaction_code: str | None = None
    reason: FailureReason | None = None
    placements: list[Placement] = field(default_factory=list)
    occupied: list[CellKey] = field(default_factory=list)
    remaining_unplaced: int = 0
    rolled_back: bool | None = None


@dataclass
class AvailabilityOutput:
    """Per-location availability, in request order."""

    success: bool
    locations: dict[str, bool] = field(default_factory=dict)
    error: str | None = None
    reason: FailureReason | None = None

    @property
    def all_available(self) -> bool:
        return self.success and all(self.locations.values())


@dataclass(frozen=True)
class LaneCapacity:
    """Effective capacity of one lane.

    ``level_capacities`` and ``disabled_rows`` are indexed by row - 1.
    """

    lane: int
    row_count: int
    level_capacities: tuple[int, ...]
    disabled_rows: tuple[bool, ...]
    is_transit: bool = False

    @property
    def total_cells(self) -> int:
        return sum(
            capacity
            for capacity, disabled in zip(self.level_capacities, self.disabled_rows)
            if not disabled
        )


@dataclass
class ClusterLayoutOutput:
    """Effective layout of one cluster."""

    cluster: str
    lanes: list[LaneCapacity] = field(default_factory=list)

    @property
    def total_cells(self) -> int:
        return sum(lane.total_cells for lane in self.lanes)
