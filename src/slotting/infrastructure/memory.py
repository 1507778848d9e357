"""Thread-safe in-memory stores.

These back the CLI, the web app and the test suite. The occupancy store
enforces a uniqueness constraint on (warehouse, cluster, lane, row, level),
so a concurrent duplicate write fails fast instead of overwriting a cell.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from slotting.domain.entities import (
    CellOverride,
    CellPayload,
    ClusterConfig,
    InboundTransaction,
    Product,
    ProductHome,
)
from slotting.domain.exceptions import DuplicateCellError, StorageError
from slotting.domain.value_objects import CellKey, StockStatus

logger = logging.getLogger(__name__)


class InMemoryOccupancyStore:
    """Occupancy ledger held in a dict, guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._cells: dict[str, dict[CellKey, CellPayload]] = defaultdict(dict)

    def read_occupancy(
        self,
        warehouse_id: str,
        clusters: frozenset[str] | None = None,
        keys: frozenset[CellKey] | None = None,
    ) -> set[CellKey]:
        with self._lock:
            occupied = set(self._cells.get(warehouse_id, {}))
        if clusters is not None:
            occupied = {key for key in occupied if key.cluster in clusters}
        if keys is not None:
            occupied &= keys
        return occupied

    def write_cell(
        self, warehouse_id: str, key: CellKey, payload: CellPayload
    ) -> None:
        with self._lock:
            cells = self._cells[warehouse_id]
            if key in cells:
                raise DuplicateCellError(key)
            cells[key] = payload

    def delete_cell(self, warehouse_id: str, key: CellKey) -> None:
        with self._lock:
            if self._cells[warehouse_id].pop(key, None) is None:
                raise StorageError(f"Cell {key} is not occupied")

    def payload(self, warehouse_id: str, key: CellKey) -> CellPayload | None:
        with self._lock:
            return self._cells.get(warehouse_id, {}).get(key)

    def seed(
        self, warehouse_id: str, keys: Iterable[CellKey], product_id: str = "existing"
    ) -> None:
        """Mark cells as occupied without going through a commit."""
        with self._lock:
            for key in keys:
                self._cells[warehouse_id][key] = CellPayload(
                    product_id=product_id, carton_qty=0, status=StockStatus.RELEASE
                )


@dataclass
class WarehouseLayout:
    """Configuration of one warehouse."""

    clusters: list[ClusterConfig] = field(default_factory=list)
    overrides: list[CellOverride] = field(default_factory=list)
    products: list[Product] = field(default_factory=list)
    homes: list[ProductHome] = field(default_factory=list)


class InMemoryCatalog:
    """Read-only catalog over per-warehouse layouts."""

    def __init__(self, layouts: dict[str, WarehouseLayout] | None = None) -> None:
        self._layouts = dict(layouts or {})

    def _layout(self, warehouse_id: str) -> WarehouseLayout:
        return self._layouts.get(warehouse_id) or WarehouseLayout()

    @property
    def warehouses(self) -> list[str]:
        return sorted(self._layouts)

    def cluster_configs(self, warehouse_id: str) -> list[ClusterConfig]:
        return list(self._layout(warehouse_id).clusters)

    def cell_overrides(self, warehouse_id: str) -> list[CellOverride]:
        return list(self._layout(warehouse_id).overrides)

    def products(self, warehouse_id: str) -> list[Product]:
        return list(self._layout(warehouse_id).products)

    def product_homes(self, warehouse_id: str) -> list[ProductHome]:
        return list(self._layout(warehouse_id).homes)

    def find_product(self, warehouse_id: str, code: str) -> Product | None:
        for product in self._layout(warehouse_id).products:
            if product.code == code and product.is_active:
                return product
        return None


class InMemoryTransactionLog:
    """Append-only list of committed transactions."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._transactions: list[InboundTransaction] = []
        self._sequences: dict[tuple[str, date], int] = defaultdict(int)

    def next_sequence(self, warehouse_id: str, day: date) -> int:
        with self._lock:
            self._sequences[(warehouse_id, day)] += 1
            return self._sequences[(warehouse_id, day)]

    def record(self, transaction: InboundTransaction) -> None:
        with self._lock:
            self._transactions.append(transaction)
        logger.info(
            f"Recorded transaction {transaction.transaction_code} "
            f"({len(transaction.placements)} cell(s))"
        )

    @property
    def transactions(self) -> list[InboundTransaction]:
        with self._lock:
            return list(self._transactions)
