"""Domain services for slot allocation.

- ConfigResolver: effective row counts and level capacities per cell
- HomeRegistry: product home zones in search order
- OccupancyOracle: point-in-time occupancy snapshots and re-checks
- PlacementPlanner: home search followed by transit overflow
- ReservationCommitter: optimistic re-validation and per-cell writes
"""

from .batch_code import BatchCode, parse_batch_code
from .config_resolver import (
    FALLBACK_LEVEL_CAPACITY,
    FALLBACK_ROW_COUNT,
    ConfigResolver,
)
from .home_registry import HomeRegistry
from .occupancy import AvailabilityReport, OccupancyOracle, OccupancySnapshot
from .placement_planner import PlacementPlanner
from .quantity_split import DEFAULT_REMAINDER_THRESHOLD, CartonSplit, split_cartons
from .reservation import CommitTemplate, ReservationCommitter
from .session import Deadline, PlacementSession

__all__ = [
    "AvailabilityReport",
    "BatchCode",
    "CartonSplit",
    "CommitTemplate",
    "ConfigResolver",
    "DEFAULT_REMAINDER_THRESHOLD",
    "Deadline",
    "FALLBACK_LEVEL_CAPACITY",
    "FALLBACK_ROW_COUNT",
    "HomeRegistry",
    "OccupancyOracle",
    "OccupancySnapshot",
    "PlacementPlanner",
    "PlacementSession",
    "ReservationCommitter",
    "parse_batch_code",
    "split_cartons",
]
