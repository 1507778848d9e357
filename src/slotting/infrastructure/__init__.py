"""Infrastructure layer - stores, locks and formatters."""

from .formatters import ClusterMapFormatter, PlacementPlanFormatter
from .locks import ClusterLockRegistry
from .memory import (
    InMemoryCatalog,
    InMemoryOccupancyStore,
    InMemoryTransactionLog,
    WarehouseLayout,
)

__all__ = [
    "ClusterLockRegistry",
    "ClusterMapFormatter",
    "InMemoryCatalog",
    "InMemoryOccupancyStore",
    "InMemoryTransactionLog",
    "PlacementPlanFormatter",
    "WarehouseLayout",
]
