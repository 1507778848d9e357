"""Text formatters for placement plans and cluster layouts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from slotting.domain import Placement

if TYPE_CHECKING:
    from slotting.application.dtos import LaneCapacity


class PlacementPlanFormatter:
    """Formats a list of placements as a table."""

    def format(
        self,
        placements: list[Placement],
        remaining_unplaced: int = 0,
        title: str = "PLACEMENT PLAN",
    ) -> str:
        if not placements:
            lines = ["No free locations found."]
        else:
            lines = [
                title,
                "=" * 64,
                f"{'#':<4} {'Location':<16} {'Phase':<14} {'Cartons':<9} {'Status'}",
                "-" * 64,
            ]
            total = 0
            for index, placement in enumerate(placements, start=1):
                lines.append(
                    f"{index:<4} {str(placement.key):<16} {placement.phase.value:<14} "
                    f"{placement.carton_qty:<9} {placement.status.value}"
                )
                total += placement.carton_qty
            lines.append("-" * 64)
            lines.append(f"{'TOTAL':<4} {len(placements):<16} {'':<14} {total:<9}")

        if remaining_unplaced:
            lines.append("")
            lines.append(
                f"WARNING: {remaining_unplaced} pallet(s) could not be placed "
                "(warehouse full)"
            )
        return "\n".join(lines)


class ClusterMapFormatter:
    """Formats effective lane capacities of one cluster."""

    def format(self, cluster: str, lanes: "list[LaneCapacity]") -> str:
        if not lanes:
            return f"Cluster {cluster} has no lanes."

        lines = [
            f"CLUSTER {cluster}",
            "=" * 60,
            f"{'Lane':<6} {'Rows':<6} {'Levels per row':<30} {'Flags'}",
            "-" * 60,
        ]
        for lane in lanes:
            levels = " ".join(
                "x" if disabled else str(capacity)
                for capacity, disabled in zip(lane.level_capacities, lane.disabled_rows)
            )
            flags = []
            if lane.is_transit:
                flags.append("transit")
            if any(lane.disabled_rows):
                flags.append("disabled rows")
            lines.append(
                f"L{lane.lane:<5} {lane.row_count:<6} {levels:<30} {', '.join(flags)}"
            )
        lines.append("-" * 60)
        total = sum(lane.total_cells for lane in lanes)
        lines.append(f"Usable cells: {total}")
        return "\n".join(lines)
