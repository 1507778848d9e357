"""Contracts module - protocols for cross-layer communication.

The allocation core depends on these protocols rather than on concrete
stores, so the same services run against the in-memory infrastructure in
tests and against a database-backed ledger in production.

Example:
    ```python
    from slotting.contracts import OccupancyRepository

    def occupied_count(repo: OccupancyRepository, warehouse_id: str) -> int:
        return len(repo.read_occupancy(warehouse_id))
    ```
"""

from .protocols import (
    LockProvider as LockProvider,
    OccupancyRepository as OccupancyRepository,
    TransactionLog as TransactionLog,
    WarehouseCatalog as WarehouseCatalog,
)

__all__ = [
    "LockProvider",
    "OccupancyRepository",
    "TransactionLog",
    "WarehouseCatalog",
]
