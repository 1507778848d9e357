"""Cluster layout endpoints."""

from fastapi import APIRouter

from slotting.domain.exceptions import NotFoundError
from slotting.web.dependencies import LayoutQueryDep, ServiceFactoryDep
from slotting.web.schemas.responses import ClusterLayoutResponse, LaneCapacitySchema

router = APIRouter(prefix="/layout", tags=["layout"])


@router.get("/{cluster}", response_model=ClusterLayoutResponse)
async def get_cluster_layout(
    cluster: str,
    query: LayoutQueryDep,
    factory: ServiceFactoryDep,
    warehouse_id: str | None = None,
) -> ClusterLayoutResponse:
    """Effective lane/row/level capacity of a cluster.

    Args:
        cluster: Cluster letter.
        query: Injected DescribeClusterQuery.
        factory: Injected ServiceFactory, supplies the default warehouse.
        warehouse_id: Warehouse to describe; defaults to the configured one.

    Raises:
        NotFoundError: If no warehouse is given or configured, or the cluster
            is unknown (handled by exception handler).
    """
    warehouse_id = warehouse_id or factory.warehouse_id
    if not warehouse_id:
        raise NotFoundError("No warehouse configured")

    layout = query.execute(warehouse_id, cluster)
    lanes = [
        LaneCapacitySchema(
            lane=f"L{lane.lane}",
            row_count=lane.row_count,
            level_capacities=list(lane.level_capacities),
            disabled_rows=[
                f"B{row}"
                for row, disabled in enumerate(lane.disabled_rows, start=1)
                if disabled
            ],
            is_transit=lane.is_transit,
            total_cells=lane.total_cells,
        )
        for lane in layout.lanes
    ]
    return ClusterLayoutResponse(
        warehouse_id=warehouse_id,
        cluster=layout.cluster,
        lanes=lanes,
        total_cells=layout.total_cells,
    )
