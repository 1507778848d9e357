"""Placement planning: which cells should hold a product's pallets.

The planner walks two tiers:

1. Home search. Each of the product's homes, in priority order, is scanned
   lane by lane, row by row, level by level. Lanes covered by a transit
   override are skipped, row ranges are clamped to the lane's effective row
   count and the level cap is the smaller of the cell's effective capacity
   and the home's per-location limit.
2. Transit overflow. Only when homes are exhausted, every transit override
   in the warehouse is scanned with the same nested search.

Disabled cells are excluded in both tiers. The planner only reads the
snapshot it is given and never performs I/O, so identical inputs give
identical plans.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator

from ..entities import CellOverride, Placement, PlacementResult, Product, ProductHome
from ..exceptions import ValidationError
from ..value_objects import CellKey, IntRange, PlacementPhase
from .config_resolver import ConfigResolver
from .home_registry import HomeRegistry
from .occupancy import OccupancySnapshot
from .quantity_split import CartonSplit

logger = logging.getLogger(__name__)


class PlacementPlanner:
    """Computes an ordered list of cell assignments for a request."""

    def __init__(self, resolver: ConfigResolver, homes: HomeRegistry) -> None:
        self.resolver = resolver
        self.homes = homes

    def plan(
        self,
        product: Product,
        pallets_needed: int,
        snapshot: OccupancySnapshot,
        split: CartonSplit | None = None,
        spare_cells: int = 0,
    ) -> PlacementResult:
        """Plan placements for ``pallets_needed`` pallets of ``product``.

        Args:
            product: The product being stored.
            pallets_needed: Pallets to place, already converted from cartons.
            snapshot: Occupancy at planning time.
            split: Carton breakdown used to fill in per-placement quantities.
                Defaults to full pallets only.
            spare_cells: Extra candidates to collect after the request is
                satisfied, used as substitutes when committing.

        Returns:
            PlacementResult with home placements before transit placements.
            A plan that could not place everything is returned with
            ``remaining_unplaced > 0`` rather than raising.

        Raises:
            ValidationError: If ``pallets_needed`` is not positive.
        """
        if pallets_needed <= 0:
            raise ValidationError("Pallets needed must be greater than zero")
        if spare_cells < 0:
            raise ValidationError("Spare cells cannot be negative")
        if split is None:
            split = CartonSplit.for_pallets(pallets_needed, product.cartons_per_pallet)

        target = pallets_needed + spare_cells
        consumed: set[CellKey] = set()
        found: list[tuple[CellKey, PlacementPhase]] = []

        for home in self.homes.homes_for(product.id):
            if len(found) >= target:
                break
            self._collect(
                self._home_cells(home),
                PlacementPhase.PRIMARY_HOME,
                snapshot,
                consumed,
                found,
                target,
            )
        home_count = len(found)
        logger.debug(
            f"Home search for {product.code}: {home_count} of {target} cells"
        )

        if len(found) < target:
            transit = self.resolver.transit_overrides()
            if home_count < pallets_needed:
                logger.info(
                    f"Home zones of {product.code} exhausted, "
                    f"overflowing {pallets_needed - home_count} pallet(s) to transit"
                )
            for cluster, override in transit:
                if len(found) >= target:
                    break
                self._collect(
                    self._transit_cells(cluster, override),
                    PlacementPhase.IN_TRANSIT,
                    snapshot,
                    consumed,
                    found,
                    target,
                )

        placements = tuple(
            Placement(key, phase, *split.cartons_for(ordinal))
            for ordinal, (key, phase) in enumerate(found)
        )
        result = PlacementResult(placements=placements, pallets_needed=pallets_needed)
        if result.is_full:
            logger.warning(
                f"No room for {result.remaining_unplaced} of {pallets_needed} "
                f"pallet(s) of {product.code}"
            )
        return result

    def _collect(
        self,
        cells: Iterable[CellKey],
        phase: PlacementPhase,
        snapshot: OccupancySnapshot,
        consumed: set[CellKey],
        found: list[tuple[CellKey, PlacementPhase]],
        target: int,
    ) -> None:
        for key in cells:
            if len(found) >= target:
                return
            if key in snapshot or key in consumed:
                continue
            consumed.add(key)
            found.append((key, phase))

    def _levels(
        self,
        cluster: str,
        lane: int,
        rows: IntRange,
        cap_for: Callable[[int], int],
    ) -> Iterator[CellKey]:
        for row in rows:
            if self.resolver.is_disabled(cluster, lane, row):
                continue
            for level in range(1, cap_for(row) + 1):
                yield CellKey(cluster, lane, row, level)

    def _home_cells(self, home: ProductHome) -> Iterator[CellKey]:
        """Candidate cells of a home in lane, row, level order."""
        for lane in home.lane_range:
            if self.resolver.is_transit_lane(home.cluster, lane):
                continue
            row_count = self.resolver.effective_row_count(home.cluster, lane)
            rows = home.row_range.clamp_end(row_count)
            if rows is None:
                continue
            yield from self._levels(
                home.cluster,
                lane,
                rows,
                lambda row, lane=lane: HomeRegistry.cell_cap(
                    self.resolver, home, lane, row
                ),
            )

    def _transit_cells(self, cluster: str, override: CellOverride) -> Iterator[CellKey]:
        """Candidate cells of one transit override in lane, row, level order."""
        for lane in override.lane_range:
            row_count = self.resolver.effective_row_count(cluster, lane)
            rows = (override.row_range or IntRange(1, row_count)).clamp_end(row_count)
            if rows is None:
                continue
            yield from self._levels(
                cluster,
                lane,
                rows,
                lambda row, lane=lane: self.resolver.effective_level_capacity(
                    cluster, lane, row
                ),
            )
