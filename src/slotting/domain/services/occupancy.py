"""Point-in-time occupancy views for planning and validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Iterator

from ..value_objects import CellKey

if TYPE_CHECKING:
    from slotting.contracts.protocols import OccupancyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OccupancySnapshot:
    """Immutable set of occupied cells, read once per planning pass."""

    warehouse_id: str
    occupied: frozenset[CellKey] = frozenset()
    clusters: frozenset[str] | None = None
    taken_at: datetime = field(default_factory=datetime.now)

    def __contains__(self, key: object) -> bool:
        return key in self.occupied

    def __iter__(self) -> Iterator[CellKey]:
        return iter(sorted(self.occupied))

    def __len__(self) -> int:
        return len(self.occupied)


@dataclass(frozen=True)
class AvailabilityReport:
    """Partition of a list of cells into free and occupied, order preserved."""

    available: tuple[CellKey, ...]
    occupied: tuple[CellKey, ...]

    @property
    def all_available(self) -> bool:
        return not self.occupied


class OccupancyOracle:
    """Reads occupancy from the inventory ledger."""

    def __init__(self, repository: "OccupancyRepository") -> None:
        self.repository = repository

    def snapshot(
        self, warehouse_id: str, clusters: Iterable[str] | None = None
    ) -> OccupancySnapshot:
        """Take one consistent snapshot, optionally limited to some clusters."""
        cluster_filter = frozenset(clusters) if clusters is not None else None
        occupied = self.repository.read_occupancy(warehouse_id, clusters=cluster_filter)
        logger.debug(
            f"Snapshot of warehouse {warehouse_id}: {len(occupied)} occupied cells"
        )
        return OccupancySnapshot(
            warehouse_id=warehouse_id,
            occupied=frozenset(occupied),
            clusters=cluster_filter,
        )

    def check(self, warehouse_id: str, keys: Iterable[CellKey]) -> AvailabilityReport:
        """Re-read occupancy restricted to exactly ``keys``."""
        ordered = list(dict.fromkeys(keys))
        occupied = self.repository.read_occupancy(warehouse_id, keys=frozenset(ordered))
        return AvailabilityReport(
            available=tuple(key for key in ordered if key not in occupied),
            occupied=tuple(key for key in ordered if key in occupied),
        )
