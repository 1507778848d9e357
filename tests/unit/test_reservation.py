"""Unit tests for ReservationCommitter re-validation, writes and rollback."""

from __future__ import annotations

import pytest

from slotting.domain import (
    CellKey,
    CellOverride,
    DuplicateCellError,
    InsufficientCapacityError,
    IntRange,
    Placement,
    PlacementPhase,
    RowAddress,
    SessionState,
    SessionTimeoutError,
    StockStatus,
    StorageError,
    ValidationError,
    WriteError,
)
from slotting.domain.services import (
    CartonSplit,
    CommitTemplate,
    ConfigResolver,
    Deadline,
    PlacementSession,
    ReservationCommitter,
    split_cartons,
)
from slotting.infrastructure import ClusterLockRegistry, InMemoryOccupancyStore

WAREHOUSE = "WH-01"


class FailingStore(InMemoryOccupancyStore):
    """Store whose n-th write (1-based) raises StorageError."""

    def __init__(self, fail_on: int, fail_deletes: bool = False) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.fail_deletes = fail_deletes
        self.writes = 0

    def write_cell(self, warehouse_id, key, payload) -> None:
        self.writes += 1
        if self.writes == self.fail_on:
            raise StorageError("disk full")
        super().write_cell(warehouse_id, key, payload)

    def delete_cell(self, warehouse_id, key) -> None:
        if self.fail_deletes:
            raise StorageError("connection lost")
        super().delete_cell(warehouse_id, key)


class RacingStore(InMemoryOccupancyStore):
    """Store where another writer claims ``stolen`` right after it is read as free."""

    def __init__(self, stolen: CellKey) -> None:
        super().__init__()
        self.stolen = stolen

    def write_cell(self, warehouse_id, key, payload) -> None:
        if key == self.stolen:
            self.stolen = None
            super().write_cell(warehouse_id, key, payload)
            raise DuplicateCellError(key)
        super().write_cell(warehouse_id, key, payload)


def plan(*keys: CellKey) -> list[Placement]:
    return [Placement(key, PlacementPhase.PRIMARY_HOME) for key in keys]


def row_keys(lane: int, row: int, levels: int = 3) -> list[CellKey]:
    return [CellKey("A", lane, row, level) for level in range(1, levels + 1)]


@pytest.fixture
def resolver(cluster_a) -> ConfigResolver:
    return ConfigResolver(
        [cluster_a],
        [CellOverride("A", IntRange(9, 9), IntRange(1, 1), is_disabled=True)],
    )


@pytest.fixture
def store() -> InMemoryOccupancyStore:
    return InMemoryOccupancyStore()


@pytest.fixture
def template() -> CommitTemplate:
    return CommitTemplate(product_id="p-1", transaction_code="INB-20260101-0001", batch_code="2612311A2B")


@pytest.fixture
def session() -> PlacementSession:
    return PlacementSession(WAREHOUSE, "SKU-1")


class TestCommit:
    """Tests for ReservationCommitter.commit()."""

    def test_writes_planned_cells(self, store, resolver, template, session) -> None:
        planned = plan(*row_keys(1, 1))
        committer = ReservationCommitter(store, resolver)

        written = committer.commit(
            WAREHOUSE, planned, 3, split_cartons(50, 20), template, session
        )

        assert [p.key for p in written] == row_keys(1, 1)
        assert session.state is SessionState.COMMITTING
        payload = store.payload(WAREHOUSE, CellKey("A", 1, 1, 3))
        assert payload.carton_qty == 10
        assert payload.status is StockStatus.RECEH
        assert payload.transaction_code == "INB-20260101-0001"
        assert store.payload(WAREHOUSE, CellKey("A", 1, 1, 1)).status is StockStatus.RELEASE

    def test_skips_cells_taken_since_planning(self, store, resolver, template, session) -> None:
        planned = plan(*row_keys(1, 1), CellKey("A", 1, 2, 1))
        store.seed(WAREHOUSE, [CellKey("A", 1, 1, 2)])

        written = ReservationCommitter(store, resolver).commit(
            WAREHOUSE, planned, 3, CartonSplit.for_pallets(3, 20), template, session
        )

        assert [p.key for p in written] == [
            CellKey("A", 1, 1, 1),
            CellKey("A", 1, 1, 3),
            CellKey("A", 1, 2, 1),
        ]

    def test_insufficient_capacity_writes_nothing(self, store, resolver, template, session) -> None:
        planned = plan(*row_keys(1, 1))
        store.seed(WAREHOUSE, [CellKey("A", 1, 1, 1)])

        with pytest.raises(InsufficientCapacityError) as exc_info:
            ReservationCommitter(store, resolver).commit(
                WAREHOUSE, planned, 3, CartonSplit.for_pallets(3, 20), template, session
            )

        assert exc_info.value.occupied == [CellKey("A", 1, 1, 1)]
        assert exc_info.value.shortfall == 1
        assert store.read_occupancy(WAREHOUSE) == {CellKey("A", 1, 1, 1)}

    def test_write_failure_rolls_back(self, resolver, template, session) -> None:
        store = FailingStore(fail_on=3)
        planned = plan(*row_keys(1, 1))

        with pytest.raises(WriteError) as exc_info:
            ReservationCommitter(store, resolver).commit(
                WAREHOUSE, planned, 3, CartonSplit.for_pallets(3, 20), template, session
            )

        assert exc_info.value.key == CellKey("A", 1, 1, 3)
        assert exc_info.value.rolled_back
        assert store.read_occupancy(WAREHOUSE) == set()

    def test_incomplete_rollback_is_reported(self, resolver, template, session) -> None:
        store = FailingStore(fail_on=2, fail_deletes=True)

        with pytest.raises(WriteError) as exc_info:
            ReservationCommitter(store, resolver).commit(
                WAREHOUSE, plan(*row_keys(1, 1)), 3, CartonSplit.for_pallets(3, 20), template, session
            )

        assert not exc_info.value.rolled_back

    def test_expired_deadline_before_validation(self, store, resolver, template, session) -> None:
        deadline = Deadline(0.0)
        with pytest.raises(SessionTimeoutError):
            ReservationCommitter(store, resolver).commit(
                WAREHOUSE, plan(*row_keys(1, 1)), 1, CartonSplit.for_pallets(1, 20),
                template, session, deadline,
            )
        assert store.read_occupancy(WAREHOUSE) == set()

    def test_holds_cluster_locks(self, store, resolver, template, session) -> None:
        locks = ClusterLockRegistry()
        committer = ReservationCommitter(store, resolver, locks)
        committer.commit(
            WAREHOUSE, plan(*row_keys(1, 1)), 1, CartonSplit.for_pallets(1, 20), template, session
        )
        # Released afterwards, so a second holder gets it immediately.
        with locks.hold(WAREHOUSE, ["A"], timeout=0.1):
            pass


class TestManualReservation:
    """Tests for reserve_manual() and reserve_level()."""

    def test_first_free_level(self, store, resolver, template) -> None:
        store.seed(WAREHOUSE, [CellKey("A", 2, 3, 1)])
        placement = ReservationCommitter(store, resolver).reserve_level(
            WAREHOUSE, RowAddress("A", 2, 3), 20, False, template
        )
        assert placement.key == CellKey("A", 2, 3, 2)
        assert placement.phase is PlacementPhase.MANUAL

    def test_all_levels_occupied(self, store, resolver, template) -> None:
        store.seed(WAREHOUSE, row_keys(2, 3))
        with pytest.raises(InsufficientCapacityError) as exc_info:
            ReservationCommitter(store, resolver).reserve_level(
                WAREHOUSE, RowAddress("A", 2, 3), 20, False, template
            )
        assert "A-L2-B3" in exc_info.value.message

    def test_level_claimed_concurrently_moves_on(self, resolver, template) -> None:
        store = RacingStore(stolen=CellKey("A", 1, 1, 1))
        placement = ReservationCommitter(store, resolver).reserve_level(
            WAREHOUSE, RowAddress("A", 1, 1), 20, False, template
        )
        assert placement.key == CellKey("A", 1, 1, 2)

    def test_reserve_manual_one_pallet_per_address(self, store, resolver, template, session) -> None:
        addresses = [RowAddress("A", 1, 1), RowAddress("A", 1, 2)]
        written = ReservationCommitter(store, resolver).reserve_manual(
            WAREHOUSE, addresses, split_cartons(30, 20), template, session
        )
        assert [(p.key, p.carton_qty, p.is_partial) for p in written] == [
            (CellKey("A", 1, 1, 1), 20, False),
            (CellKey("A", 1, 2, 1), 10, True),
        ]

    def test_count_mismatch(self, store, resolver, template, session) -> None:
        with pytest.raises(ValidationError):
            ReservationCommitter(store, resolver).reserve_manual(
                WAREHOUSE, [RowAddress("A", 1, 1)], CartonSplit.for_pallets(2, 20), template, session
            )

    def test_disabled_row_rejected(self, store, resolver, template, session) -> None:
        with pytest.raises(ValidationError, match="disabled"):
            ReservationCommitter(store, resolver).reserve_manual(
                WAREHOUSE, [RowAddress("A", 9, 1)], CartonSplit.for_pallets(1, 20), template, session
            )
        assert store.read_occupancy(WAREHOUSE) == set()

    def test_full_address_rolls_back_earlier_levels(self, store, resolver, template, session) -> None:
        store.seed(WAREHOUSE, row_keys(1, 2))
        addresses = [RowAddress("A", 1, 1), RowAddress("A", 1, 2)]

        with pytest.raises(InsufficientCapacityError):
            ReservationCommitter(store, resolver).reserve_manual(
                WAREHOUSE, addresses, CartonSplit.for_pallets(2, 20), template, session
            )

        assert store.read_occupancy(WAREHOUSE) == set(row_keys(1, 2))

    def test_timeout_rolls_back_earlier_levels(self, resolver, template, session) -> None:
        now = [0.0]

        class SlowStore(InMemoryOccupancyStore):
            def write_cell(self, warehouse_id, key, payload) -> None:
                super().write_cell(warehouse_id, key, payload)
                now[0] += 10.0

        store = SlowStore()
        deadline = Deadline(5.0, clock=lambda: now[0])
        addresses = [RowAddress("A", 1, 1), RowAddress("A", 1, 2)]

        with pytest.raises(SessionTimeoutError):
            ReservationCommitter(store, resolver).reserve_manual(
                WAREHOUSE, addresses, CartonSplit.for_pallets(2, 20), template, session, deadline
            )

        assert store.read_occupancy(WAREHOUSE) == set()
