"""Repository protocols for the allocation core.

The allocation core reads configuration and occupancy, and writes cells,
only through these protocols. Infrastructure implementations depend on
them, which keeps the domain services testable with in-memory stores.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, ContextManager, Iterable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from slotting.domain.entities import (
        CellOverride,
        CellPayload,
        ClusterConfig,
        InboundTransaction,
        Product,
        ProductHome,
    )
    from slotting.domain.value_objects import CellKey


@runtime_checkable
class OccupancyRepository(Protocol):
    """Narrow interface to the inventory ledger.

    Example:
        ```python
        class SqlOccupancyRepository:
            def read_occupancy(self, warehouse_id, clusters=None, keys=None):
                ...
            def write_cell(self, warehouse_id, key, payload):
                ...
            def delete_cell(self, warehouse_id, key):
                ...
        ```
    """

    def read_occupancy(
        self,
        warehouse_id: str,
        clusters: "frozenset[str] | None" = None,
        keys: "frozenset[CellKey] | None" = None,
    ) -> "set[CellKey]":
        """Return occupied cells of a warehouse in one consistent read.

        Args:
            warehouse_id: Warehouse to read.
            clusters: Only report cells in these clusters, if given.
            keys: Only report these cells, if given.
        """
        ...

    def write_cell(
        self, warehouse_id: str, key: "CellKey", payload: "CellPayload"
    ) -> None:
        """Store a pallet in a cell.

        Raises:
            DuplicateCellError: If the cell is already occupied.
            StorageError: If the write fails for any other reason.
        """
        ...

    def delete_cell(self, warehouse_id: str, key: "CellKey") -> None:
        """Remove whatever is stored in a cell.

        Raises:
            StorageError: If the delete fails.
        """
        ...


class WarehouseCatalog(Protocol):
    """Read-only access to layout and product configuration."""

    def cluster_configs(self, warehouse_id: str) -> "list[ClusterConfig]":
        ...

    def cell_overrides(self, warehouse_id: str) -> "list[CellOverride]":
        ...

    def products(self, warehouse_id: str) -> "list[Product]":
        ...

    def product_homes(self, warehouse_id: str) -> "list[ProductHome]":
        ...

    def find_product(self, warehouse_id: str, code: str) -> "Product | None":
        ...


class TransactionLog(Protocol):
    """Storage for committed placement transactions."""

    def next_sequence(self, warehouse_id: str, day: date) -> int:
        """Reserve and return the next 1-based sequence number of ``day``."""
        ...

    def record(self, transaction: "InboundTransaction") -> None:
        ...


class LockProvider(Protocol):
    """Mutual exclusion per (warehouse, cluster)."""

    def hold(
        self,
        warehouse_id: str,
        clusters: Iterable[str],
        timeout: float | None = None,
    ) -> ContextManager[None]:
        """Acquire the locks of ``clusters`` for the duration of a block.

        Raises:
            SessionTimeoutError: If the locks cannot be acquired in time.
        """
        ...
