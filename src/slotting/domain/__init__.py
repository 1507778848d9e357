"""Domain layer - slot allocation rules."""

from .entities import (
    CellOverride,
    CellPayload,
    ClusterConfig,
    InboundTransaction,
    Placement,
    PlacementResult,
    Product,
    ProductHome,
)
from .exceptions import (
    AllocationError,
    ConfigurationError,
    CorruptLocationError,
    DuplicateCellError,
    InsufficientCapacityError,
    NotFoundError,
    SessionStateError,
    SessionTimeoutError,
    StorageError,
    ValidationError,
    WriteError,
)
from .value_objects import (
    CellKey,
    FailureReason,
    IntRange,
    PlacementPhase,
    RowAddress,
    SessionState,
    StockStatus,
)

__all__ = [
    "AllocationError",
    "CellKey",
    "CellOverride",
    "CellPayload",
    "ClusterConfig",
    "ConfigurationError",
    "CorruptLocationError",
    "DuplicateCellError",
    "FailureReason",
    "InboundTransaction",
    "InsufficientCapacityError",
    "IntRange",
    "NotFoundError",
    "Placement",
    "PlacementPhase",
    "PlacementResult",
    "Product",
    "ProductHome",
    "RowAddress",
    "SessionState",
    "SessionStateError",
    "SessionTimeoutError",
    "StockStatus",
    "StorageError",
    "ValidationError",
    "WriteError",
]
