"""Commit of planned placements to the inventory ledger.

Planning works on a snapshot that can be stale by the time the caller
confirms. Before writing, the committer re-reads occupancy for exactly the
planned cells, skips the ones taken in the meantime and writes the first
free cells in plan order. Cells are written one at a time; if a write fails,
the cells already written by the same commit are deleted again.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Sequence

from ..entities import CellPayload, Placement
from ..exceptions import (
    DuplicateCellError,
    InsufficientCapacityError,
    StorageError,
    ValidationError,
    WriteError,
)
from ..value_objects import CellKey, PlacementPhase, RowAddress, SessionState
from .config_resolver import ConfigResolver
from .occupancy import OccupancyOracle
from .quantity_split import CartonSplit
from .session import Deadline, PlacementSession

if TYPE_CHECKING:
    from slotting.contracts.protocols import LockProvider, OccupancyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitTemplate:
    """Fields shared by every cell written in one commit."""

    product_id: str
    transaction_code: str | None = None
    batch_code: str | None = None
    expiry_date: date | None = None

    def payload_for(self, placement: Placement) -> CellPayload:
        return CellPayload(
            product_id=self.product_id,
            carton_qty=placement.carton_qty,
            status=placement.status,
            batch_code=self.batch_code,
            expiry_date=self.expiry_date,
            transaction_code=self.transaction_code,
        )


class ReservationCommitter:
    """Validates and writes placements for one session.

    Args:
        repository: Occupancy store to write to.
        resolver: Capacity resolver, used by single-location reservation.
        locks: Optional per-cluster lock provider held across validation
            and writing.
    """

    def __init__(
        self,
        repository: "OccupancyRepository",
        resolver: ConfigResolver,
        locks: "LockProvider | None" = None,
    ) -> None:
        self.repository = repository
        self.resolver = resolver
        self.oracle = OccupancyOracle(repository)
        self.locks = locks

    def _hold(self, warehouse_id: str, clusters: set[str], deadline: Deadline):
        if self.locks is None:
            return nullcontext()
        return self.locks.hold(warehouse_id, sorted(clusters), timeout=deadline.remaining())

    def commit(
        self,
        warehouse_id: str,
        planned: Sequence[Placement],
        pallets_needed: int,
        split: CartonSplit,
        template: CommitTemplate,
        session: PlacementSession,
        deadline: Deadline | None = None,
    ) -> list[Placement]:
        """Re-validate ``planned`` and write the first ``pallets_needed`` free cells.

        Returns:
            The written placements with carton quantities assigned in order.

        Raises:
            InsufficientCapacityError: If fewer than ``pallets_needed`` planned
                cells are still free. Nothing is written.
            WriteError: If a cell write fails. Earlier writes of this commit
                are rolled back.
            SessionTimeoutError: If the deadline passes.
        """
        deadline = deadline or Deadline(None)
        clusters = {placement.cluster for placement in planned}
        with self._hold(warehouse_id, clusters, deadline):
            session.advance(SessionState.VALIDATING)
            deadline.check("validation")
            report = self.oracle.check(warehouse_id, [p.key for p in planned])
            if len(report.available) < pallets_needed:
                raise InsufficientCapacityError(
                    required=pallets_needed,
                    available=len(report.available),
                    occupied=list(report.occupied),
                )
            if report.occupied:
                logger.info(
                    f"Skipping {len(report.occupied)} planned cell(s) occupied "
                    f"since planning: {', '.join(str(k) for k in report.occupied)}"
                )

            free = set(report.available)
            chosen = [p for p in planned if p.key in free][:pallets_needed]
            placements = [
                Placement(p.key, p.phase, *split.cartons_for(ordinal))
                for ordinal, p in enumerate(chosen)
            ]

            session.advance(SessionState.COMMITTING)
            self._write_all(warehouse_id, placements, template, deadline)
        return placements

    def reserve_manual(
        self,
        warehouse_id: str,
        addresses: Sequence[RowAddress],
        split: CartonSplit,
        template: CommitTemplate,
        session: PlacementSession,
        deadline: Deadline | None = None,
    ) -> list[Placement]:
        """Claim the first free level at each caller-chosen row address.

        Each address receives one pallet, in the order given. A failure on any
        address rolls back the levels claimed for earlier addresses.
        """
        deadline = deadline or Deadline(None)
        if len(addresses) != split.pallets_needed:
            raise ValidationError(
                f"Manual placement needs {split.pallets_needed} location(s), "
                f"got {len(addresses)}"
            )
        clusters = {address.cluster for address in addresses}
        written: list[Placement] = []
        with self._hold(warehouse_id, clusters, deadline):
            session.advance(SessionState.VALIDATING)
            for address in addresses:
                if self.resolver.is_disabled(address.cluster, address.lane, address.row):
                    raise ValidationError(f"Location {address} is disabled")
            session.advance(SessionState.COMMITTING)
            try:
                for ordinal, address in enumerate(addresses):
                    deadline.check("manual reservation")
                    carton_qty, is_partial = split.cartons_for(ordinal)
                    written.append(
                        self.reserve_level(
                            warehouse_id, address, carton_qty, is_partial, template
                        )
                    )
            except WriteError as exc:
                exc.rolled_back = self._rollback(warehouse_id, [p.key for p in written])
                raise
            except Exception:
                self._rollback(warehouse_id, [p.key for p in written])
                raise
        return written

    def reserve_level(
        self,
        warehouse_id: str,
        address: RowAddress,
        carton_qty: int,
        is_partial: bool,
        template: CommitTemplate,
    ) -> Placement:
        """Single-location mode: claim the first free level at ``address``.

        Levels are scanned from 1 up to the row's effective capacity. A level
        taken by a concurrent writer between the check and the write is
        skipped in favour of the next one.

        Raises:
            InsufficientCapacityError: If every level is occupied.
            WriteError: If the store fails for a reason other than a
                duplicate cell.
        """
        capacity = self.resolver.effective_level_capacity(
            address.cluster, address.lane, address.row
        )
        levels = [address.at_level(level) for level in range(1, capacity + 1)]
        report = self.oracle.check(warehouse_id, levels)
        for key in report.available:
            placement = Placement(key, PlacementPhase.MANUAL, carton_qty, is_partial)
            try:
                self.repository.write_cell(
                    warehouse_id, key, template.payload_for(placement)
                )
            except DuplicateCellError:
                logger.info(f"Level {key} claimed concurrently, trying next level")
                continue
            except StorageError as exc:
                raise WriteError(key, f"Failed to store pallet at {key}: {exc}") from exc
            return placement
        raise InsufficientCapacityError(
            required=1,
            available=0,
            occupied=levels,
            message=f"No free level at {address}; all {capacity} level(s) are occupied",
        )

    def _write_all(
        self,
        warehouse_id: str,
        placements: Sequence[Placement],
        template: CommitTemplate,
        deadline: Deadline,
    ) -> None:
        written: list[CellKey] = []
        for placement in placements:
            try:
                deadline.check("commit")
                self.repository.write_cell(
                    warehouse_id, placement.key, template.payload_for(placement)
                )
            except StorageError as exc:
                rolled_back = self._rollback(warehouse_id, written)
                raise WriteError(
                    placement.key,
                    f"Failed to store pallet at {placement.key}: {exc}",
                    rolled_back=rolled_back,
                ) from exc
            except Exception:
                self._rollback(warehouse_id, written)
                raise
            written.append(placement.key)
        logger.debug(f"Wrote {len(written)} cell(s) in warehouse {warehouse_id}")

    def _rollback(self, warehouse_id: str, written: Sequence[CellKey]) -> bool:
        """Delete cells written by a failed commit, newest first."""
        complete = True
        for key in reversed(written):
            try:
                self.repository.delete_cell(warehouse_id, key)
            except StorageError as exc:
                complete = False
                logger.error(f"Rollback of {key} in warehouse {warehouse_id} failed: {exc}")
        if written:
            logger.warning(
                f"Rolled back {len(written)} cell(s) in warehouse {warehouse_id}"
                + ("" if complete else " (incomplete)")
            )
        return complete
