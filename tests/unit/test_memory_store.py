"""Unit tests for the in-memory stores and cluster locks."""

import threading
from datetime import date

import pytest

from slotting.domain import (
    CellKey,
    CellPayload,
    DuplicateCellError,
    InboundTransaction,
    Product,
    SessionTimeoutError,
    StockStatus,
    StorageError,
)
from slotting.infrastructure import (
    ClusterLockRegistry,
    InMemoryCatalog,
    InMemoryOccupancyStore,
    InMemoryTransactionLog,
    WarehouseLayout,
)

A111 = CellKey("A", 1, 1, 1)
C821 = CellKey("C", 8, 2, 1)


def payload(product_id: str = "p-1") -> CellPayload:
    return CellPayload(product_id=product_id, carton_qty=20, status=StockStatus.RELEASE)


class TestInMemoryOccupancyStore:
    """Tests for InMemoryOccupancyStore."""

    def test_read_filters(self) -> None:
        store = InMemoryOccupancyStore()
        store.seed("WH-01", [A111, C821])
        store.seed("WH-02", [CellKey("A", 2, 2, 2)])

        assert store.read_occupancy("WH-01") == {A111, C821}
        assert store.read_occupancy("WH-01", clusters=frozenset({"C"})) == {C821}
        assert store.read_occupancy("WH-01", keys=frozenset({A111, CellKey("A", 1, 1, 2)})) == {A111}
        assert store.read_occupancy("WH-03") == set()

    def test_duplicate_write_rejected(self) -> None:
        store = InMemoryOccupancyStore()
        store.write_cell("WH-01", A111, payload("first"))
        with pytest.raises(DuplicateCellError) as exc_info:
            store.write_cell("WH-01", A111, payload("second"))
        assert exc_info.value.key == A111
        assert store.payload("WH-01", A111).product_id == "first"

    def test_same_cell_in_other_warehouse(self) -> None:
        store = InMemoryOccupancyStore()
        store.write_cell("WH-01", A111, payload())
        store.write_cell("WH-02", A111, payload())
        assert store.read_occupancy("WH-02") == {A111}

    def test_delete(self) -> None:
        store = InMemoryOccupancyStore()
        store.write_cell("WH-01", A111, payload())
        store.delete_cell("WH-01", A111)
        assert store.payload("WH-01", A111) is None
        with pytest.raises(StorageError):
            store.delete_cell("WH-01", A111)


class TestInMemoryCatalog:
    """Tests for InMemoryCatalog."""

    def test_find_product_skips_inactive(self) -> None:
        layout = WarehouseLayout(
            products=[
                Product("p-1", "SKU-1", 20, is_active=False),
                Product("p-2", "SKU-2", 20),
            ]
        )
        catalog = InMemoryCatalog({"WH-01": layout})
        assert catalog.find_product("WH-01", "SKU-1") is None
        assert catalog.find_product("WH-01", "SKU-2").id == "p-2"
        assert catalog.find_product("WH-02", "SKU-2") is None
        assert catalog.warehouses == ["WH-01"]

    def test_unknown_warehouse_is_empty(self) -> None:
        catalog = InMemoryCatalog()
        assert catalog.cluster_configs("WH-09") == []
        assert catalog.product_homes("WH-09") == []


class TestInMemoryTransactionLog:
    """Tests for InMemoryTransactionLog."""

    def test_sequence_per_warehouse_and_day(self) -> None:
        log = InMemoryTransactionLog()
        day = date(2026, 3, 14)
        assert log.next_sequence("WH-01", day) == 1
        assert log.next_sequence("WH-01", day) == 2
        assert log.next_sequence("WH-02", day) == 1
        assert log.next_sequence("WH-01", date(2026, 3, 15)) == 1

    def test_record(self) -> None:
        log = InMemoryTransactionLog()
        log.record(InboundTransaction("INB-20260314-0001", "WH-01", "p-1", None, None, 40))
        assert [t.transaction_code for t in log.transactions] == ["INB-20260314-0001"]


class TestClusterLockRegistry:
    """Tests for ClusterLockRegistry."""

    def test_timeout_while_held(self) -> None:
        locks = ClusterLockRegistry()
        entered = threading.Event()
        release = threading.Event()

        def holder() -> None:
            with locks.hold("WH-01", ["C", "A"]):
                entered.set()
                release.wait(5)

        thread = threading.Thread(target=holder)
        thread.start()
        try:
            assert entered.wait(5)
            with pytest.raises(SessionTimeoutError, match="cluster A"):
                with locks.hold("WH-01", ["A"], timeout=0.05):
                    pass
            # Other warehouses are independent.
            with locks.hold("WH-02", ["A"], timeout=0.05):
                pass
        finally:
            release.set()
            thread.join(5)

    def test_partial_acquisition_released(self) -> None:
        locks = ClusterLockRegistry()
        with locks.hold("WH-01", ["C"]):
            with pytest.raises(SessionTimeoutError):
                with locks.hold("WH-01", ["A", "C"], timeout=0.05):
                    pass
        with locks.hold("WH-01", ["A"], timeout=0.05):
            pass
