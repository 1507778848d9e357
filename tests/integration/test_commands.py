"""Integration tests for the application commands against warehouse WH-01.

WH-01 (tests/fixtures/configs/warehouse.json):
- Cluster A: 10 lanes x 9 rows x 3 levels, lane 5 shortened to 6 rows
- Cluster C: 11 lanes x 9 rows x 3 levels, lanes 8-11 transit with 2 levels,
  C-L9-B3 disabled
- SKU-1 (20 cartons/pallet) homed in A lanes 1-2; SKU-2 (40) in A lanes 4-5
- A-L1-B1-P1 already occupied
"""

from datetime import date, datetime

import pytest

from slotting.application import (
    CommitInput,
    CommitPlacementCommand,
    RecommendationInput,
)
from slotting.application.config import load_config_from_dict
from slotting.application.factory import ServiceFactory
from slotting.domain import CellKey, FailureReason, PlacementPhase, SessionState, StorageError
from slotting.infrastructure import InMemoryOccupancyStore

WAREHOUSE = "WH-01"
BATCH = "2612311A2B"


def fixed_clock() -> datetime:
    return datetime(2026, 3, 14, 9, 30)


@pytest.fixture
def commit_command(factory: ServiceFactory) -> CommitPlacementCommand:
    """Commit command sharing the factory's stores, with a fixed clock."""
    return CommitPlacementCommand(
        catalog=factory.get_catalog(),
        repository=factory.get_repository(),
        transactions=factory.get_transaction_log(),
        locks=factory.get_locks(),
        settings=factory.settings,
        clock=fixed_clock,
    )


def commit_input(**kwargs) -> CommitInput:
    values = {"warehouse_id": WAREHOUSE, "product_code": "SKU-1", "batch_code": BATCH}
    values.update(kwargs)
    return CommitInput(**values)


def locations(placements) -> list[str]:
    return [str(p.key) for p in placements]


class TestRecommendPlacement:
    """Tests for RecommendPlacementCommand."""

    def test_skips_occupied_cell(self, factory: ServiceFactory) -> None:
        output = factory.create_recommend_command().execute(
            RecommendationInput(WAREHOUSE, "SKU-1", pallets_needed=3)
        )

        assert output.success
        assert locations(output.placements) == ["A-L1-B1-P2", "A-L1-B1-P3", "A-L1-B2-P1"]
        assert output.remaining_unplaced == 0
        assert not output.is_full

    def test_cartons_converted(self, factory: ServiceFactory) -> None:
        output = factory.create_recommend_command().execute(
            RecommendationInput(WAREHOUSE, "SKU-1", cartons=50)
        )

        assert output.pallets_needed == 3
        assert [p.carton_qty for p in output.placements] == [20, 20, 10]
        assert output.placements[-1].is_partial

    def test_small_remainder_merged(self, factory: ServiceFactory) -> None:
        output = factory.create_recommend_command().execute(
            RecommendationInput(WAREHOUSE, "SKU-1", cartons=44)
        )
        assert output.pallets_needed == 2
        assert output.placements[-1].carton_qty == 24

    def test_overflow_reports_shortfall(self, factory: ServiceFactory) -> None:
        """SKU-2 home holds 45 pallets and transit 70; 200 pallets do not fit."""
        output = factory.create_recommend_command().execute(
            RecommendationInput(WAREHOUSE, "SKU-2", pallets_needed=200)
        )

        assert output.success
        assert output.is_full
        assert output.total_found == 115
        assert output.remaining_unplaced == 85
        transit = [p for p in output.placements if p.phase is PlacementPhase.IN_TRANSIT]
        assert len(transit) == 70
        assert CellKey("C", 9, 3, 1) not in {p.key for p in transit}

    def test_does_not_write(self, factory: ServiceFactory) -> None:
        command = factory.create_recommend_command()
        first = command.execute(RecommendationInput(WAREHOUSE, "SKU-1", pallets_needed=2))
        second = command.execute(RecommendationInput(WAREHOUSE, "SKU-1", pallets_needed=2))
        assert first.placements == second.placements

    def test_unknown_product(self, factory: ServiceFactory) -> None:
        output = factory.create_recommend_command().execute(
            RecommendationInput(WAREHOUSE, "SKU-404", pallets_needed=1)
        )
        assert not output.success
        assert output.reason is FailureReason.NOT_FOUND
        assert "SKU-404" in output.error

    @pytest.mark.parametrize(
        "pallets,cartons", [(None, None), (2, 40), (0, None), (None, -3)]
    )
    def test_invalid_quantity(self, factory: ServiceFactory, pallets, cartons) -> None:
        output = factory.create_recommend_command().execute(
            RecommendationInput(WAREHOUSE, "SKU-1", pallets_needed=pallets, cartons=cartons)
        )
        assert not output.success
        assert output.reason is FailureReason.VALIDATION

    def test_unconfigured_factory_has_no_products(self) -> None:
        """A factory without configuration has no products at all."""
        output = ServiceFactory().create_recommend_command().execute(
            RecommendationInput(WAREHOUSE, "SKU-1", pallets_needed=1)
        )
        assert output.reason is FailureReason.NOT_FOUND


class TestCommitPlacement:
    """Tests for CommitPlacementCommand."""

    def test_auto_commit(self, factory: ServiceFactory, commit_command) -> None:
        output = commit_command.execute(commit_input(pallets_needed=2))

        assert output.success
        assert output.state is SessionState.COMMITTED
        assert output.transaction_code == "INB-20260314-0001"
        assert locations(output.placements) == ["A-L1-B1-P2", "A-L1-B1-P3"]

        store = factory.get_repository()
        payload = store.payload(WAREHOUSE, CellKey("A", 1, 1, 2))
        assert payload.batch_code == BATCH
        assert payload.expiry_date == date(2026, 12, 31)
        assert payload.transaction_code == "INB-20260314-0001"

    def test_transaction_codes_increase(self, factory: ServiceFactory, commit_command) -> None:
        first = commit_command.execute(commit_input(pallets_needed=1))
        second = commit_command.execute(commit_input(pallets_needed=1))

        assert (first.transaction_code, second.transaction_code) == (
            "INB-20260314-0001",
            "INB-20260314-0002",
        )
        assert first.placements[0].key != second.placements[0].key
        logged = factory.get_transaction_log().transactions
        assert [t.transaction_code for t in logged] == ["INB-20260314-0001", "INB-20260314-0002"]
        assert logged[0].total_cartons == 20

    def test_explicit_expiry_wins(self, factory: ServiceFactory, commit_command) -> None:
        commit_command.execute(commit_input(pallets_needed=1, expiry_date=date(2026, 6, 1)))
        payload = factory.get_repository().payload(WAREHOUSE, CellKey("A", 1, 1, 2))
        assert payload.expiry_date == date(2026, 6, 1)

    def test_cartons_write_partial_status(self, factory: ServiceFactory, commit_command) -> None:
        output = commit_command.execute(commit_input(cartons=30))
        last = output.placements[-1]
        assert (last.carton_qty, last.is_partial) == (10, True)
        payload = factory.get_repository().payload(WAREHOUSE, last.key)
        assert payload.status.value == "receh"

    def test_explicit_locations(self, commit_command) -> None:
        output = commit_command.execute(
            commit_input(pallets_needed=2, planned_locations=["A-L2-B1-P1", "C-L8-B1-P1"])
        )
        assert output.success
        assert [p.phase for p in output.placements] == [
            PlacementPhase.PRIMARY_HOME,
            PlacementPhase.IN_TRANSIT,
        ]

    def test_stale_plan_rejected(self, factory: ServiceFactory, commit_command) -> None:
        """Two operators confirm the same recommendation; only the first succeeds."""
        plan = factory.create_recommend_command().execute(
            RecommendationInput(WAREHOUSE, "SKU-1", pallets_needed=2)
        )
        planned = locations(plan.placements)

        first = commit_command.execute(commit_input(pallets_needed=2, planned_locations=planned))
        second = commit_command.execute(commit_input(pallets_needed=2, planned_locations=planned))

        assert first.success
        assert not second.success
        assert second.state is SessionState.FAILED
        assert second.reason is FailureReason.INSUFFICIENT_LOCATIONS
        assert [str(k) for k in second.occupied] == planned
        assert second.remaining_unplaced == 2

    def test_spare_candidate_absorbs_conflict(self, commit_command) -> None:
        output = commit_command.execute(
            commit_input(
                pallets_needed=1, planned_locations=["A-L1-B1-P1", "A-L1-B1-P2"]
            )
        )
        assert output.success
        assert locations(output.placements) == ["A-L1-B1-P2"]

    @pytest.mark.parametrize(
        "location,expected",
        [
            ("C-L9-B3-P1", "disabled"),
            ("C-L8-B1-P3", "capacity"),
        ],
    )
    def test_explicit_location_rejected(self, commit_command, location, expected) -> None:
        output = commit_command.execute(
            commit_input(pallets_needed=1, planned_locations=[location])
        )
        assert output.reason is FailureReason.VALIDATION
        assert expected in output.message

    def test_duplicate_explicit_location(self, commit_command) -> None:
        output = commit_command.execute(
            commit_input(pallets_needed=2, planned_locations=["A-L2-B1-P1", "A-L2-B1-P1"])
        )
        assert output.reason is FailureReason.VALIDATION

    def test_corrupt_location_aborts_submission(self, factory: ServiceFactory, commit_command) -> None:
        output = commit_command.execute(
            commit_input(pallets_needed=2, planned_locations=["A-L2-B1-P1", "undefined-L1-B1-P1"])
        )

        assert output.reason is FailureReason.CORRUPT_LOCATION
        assert "undefined-L1-B1-P1" in output.message
        assert factory.get_repository().read_occupancy(WAREHOUSE) == {CellKey("A", 1, 1, 1)}

    def test_manual_rows(self, factory: ServiceFactory, commit_command) -> None:
        output = commit_command.execute(
            commit_input(product_code="SKU-2", pallets_needed=2, manual_locations=["A-L1-B1", "A-L4-B2"])
        )

        assert output.success
        assert locations(output.placements) == ["A-L1-B1-P2", "A-L4-B2-P1"]
        assert all(p.phase is PlacementPhase.MANUAL for p in output.placements)

    def test_manual_disabled_row(self, commit_command) -> None:
        output = commit_command.execute(
            commit_input(pallets_needed=1, manual_locations=["C-L9-B3"])
        )
        assert output.reason is FailureReason.VALIDATION

    def test_warehouse_full_writes_nothing(self, factory: ServiceFactory, commit_command) -> None:
        output = commit_command.execute(commit_input(product_code="SKU-2", pallets_needed=200))

        assert output.reason is FailureReason.INSUFFICIENT_LOCATIONS
        assert "Warehouse full" in output.message
        assert output.remaining_unplaced == 85
        assert factory.get_repository().read_occupancy(WAREHOUSE) == {CellKey("A", 1, 1, 1)}

    @pytest.mark.parametrize("batch", [None, "", "ABC", "261399PL01"])
    def test_bad_batch_code(self, commit_command, batch) -> None:
        output = commit_command.execute(commit_input(pallets_needed=1, batch_code=batch))
        assert output.reason is FailureReason.VALIDATION
        assert output.transaction_code is None

    def test_both_location_kinds_rejected(self, commit_command) -> None:
        output = commit_command.execute(
            commit_input(
                pallets_needed=1, planned_locations=["A-L2-B1-P1"], manual_locations=["A-L2-B1"]
            )
        )
        assert output.reason is FailureReason.VALIDATION

    def test_write_failure_rolled_back(self, factory: ServiceFactory) -> None:
        class BrokenStore(InMemoryOccupancyStore):
            def __init__(self) -> None:
                super().__init__()
                self.writes = 0

            def write_cell(self, warehouse_id, key, payload) -> None:
                self.writes += 1
                if self.writes == 2:
                    raise StorageError("connection reset")
                super().write_cell(warehouse_id, key, payload)

        store = BrokenStore()
        command = CommitPlacementCommand(
            catalog=factory.get_catalog(),
            repository=store,
            transactions=factory.get_transaction_log(),
            clock=fixed_clock,
        )

        output = command.execute(commit_input(pallets_needed=3))

        assert output.reason is FailureReason.WRITE_ERROR
        assert output.rolled_back is True
        assert store.read_occupancy(WAREHOUSE) == set()
        assert factory.get_transaction_log().transactions == []


class TestOverrideTimestamps:
    """Overrides mixing timezone-aware and naive creation times."""

    @pytest.fixture
    def mixed_factory(self) -> ServiceFactory:
        config = load_config_from_dict(
            {
                "warehouse_id": "WH-TZ",
                "clusters": [{"cluster": "A"}],
                "overrides": [
                    {
                        "cluster": "A",
                        "lanes": {"start": 1, "end": 1},
                        "custom_row_count": 2,
                        "created_at": "2024-01-01T00:00:00Z",
                    },
                    {
                        "cluster": "A",
                        "lanes": {"start": 1, "end": 1},
                        "custom_row_count": 1,
                        "created_at": "2024-06-01T00:00:00",
                    },
                    {"cluster": "A", "lanes": {"start": 2, "end": 2}, "custom_row_count": 5},
                ],
                "products": [{"code": "SKU-1", "cartons_per_pallet": 10}],
                "homes": [
                    {
                        "product": "SKU-1",
                        "cluster": "A",
                        "lanes": {"start": 1, "end": 1},
                        "rows": {"start": 1, "end": 9},
                    }
                ],
            }
        )
        return ServiceFactory(config=config)

    def test_recommend_applies_newest_override(self, mixed_factory: ServiceFactory) -> None:
        output = mixed_factory.create_recommend_command().execute(
            RecommendationInput("WH-TZ", "SKU-1", pallets_needed=2)
        )

        assert output.success
        assert locations(output.placements) == ["A-L1-B1-P1", "A-L1-B1-P2"]

    def test_commit_succeeds(self, mixed_factory: ServiceFactory) -> None:
        output = mixed_factory.create_commit_command().execute(
            CommitInput("WH-TZ", "SKU-1", pallets_needed=3, batch_code=BATCH)
        )

        assert output.success
        assert locations(output.placements) == ["A-L1-B1-P1", "A-L1-B1-P2", "A-L1-B1-P3"]


class TestCheckAvailability:
    """Tests for CheckAvailabilityCommand."""

    def test_reports_each_location(self, factory: ServiceFactory) -> None:
        output = factory.create_availability_command().execute(
            WAREHOUSE, ["A-L1-B1-P2", "A-L1-B1-P1"]
        )
        assert output.success
        assert output.locations == {"A-L1-B1-P2": True, "A-L1-B1-P1": False}
        assert not output.all_available

    def test_sees_commits(self, factory: ServiceFactory, commit_command) -> None:
        commit_command.execute(commit_input(pallets_needed=1))
        output = factory.create_availability_command().execute(WAREHOUSE, ["A-L1-B1-P2"])
        assert output.locations == {"A-L1-B1-P2": False}

    def test_corrupt_location(self, factory: ServiceFactory) -> None:
        output = factory.create_availability_command().execute(WAREHOUSE, ["A-1-2-3"])
        assert not output.success
        assert output.reason is FailureReason.CORRUPT_LOCATION


class TestDescribeCluster:
    """Tests for DescribeClusterQuery."""

    def test_cluster_a(self, factory: ServiceFactory) -> None:
        layout = factory.create_layout_query().execute(WAREHOUSE, "A")
        assert len(layout.lanes) == 10
        assert layout.lanes[4].row_count == 6
        assert layout.total_cells == 9 * 27 + 18

    def test_cluster_c(self, factory: ServiceFactory) -> None:
        layout = factory.create_layout_query().execute(WAREHOUSE, "C")
        lane9 = layout.lanes[8]
        assert lane9.is_transit
        assert lane9.level_capacities == (2,) * 9
        assert lane9.disabled_rows[2]
        assert lane9.total_cells == 16
        assert layout.total_cells == 7 * 27 + 4 * 18 - 2

    def test_unknown_cluster(self, factory: ServiceFactory) -> None:
        from slotting.domain import NotFoundError

        with pytest.raises(NotFoundError):
            factory.create_layout_query().execute(WAREHOUSE, "Z")
