"""Placement recommendation endpoints."""

from fastapi import APIRouter

from slotting.application.dtos import RecommendationInput, RecommendationOutput
from slotting.web.dependencies import RecommendCommandDep
from slotting.web.schemas.common import LocationSchema
from slotting.web.schemas.requests import RecommendationRequest
from slotting.web.schemas.responses import RecommendationResponse

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


def _recommendation_to_schema(output: RecommendationOutput) -> RecommendationResponse:
    """Convert RecommendationOutput to response schema."""
    return RecommendationResponse(
        success=output.success,
        locations=[LocationSchema.from_placement(p) for p in output.placements],
        total_found=output.total_found,
        remaining_pallets=output.remaining_unplaced,
        is_full=output.is_full,
        timestamp=output.timestamp,
        error=output.error,
        reason=output.reason.value if output.reason else None,
    )


@router.post("", response_model=RecommendationResponse)
def recommend_placement(
    request: RecommendationRequest,
    command: RecommendCommandDep,
) -> RecommendationResponse:
    """Plan locations for a product without writing anything.

    Args:
        request: Warehouse, product and quantity.
        command: Injected RecommendPlacementCommand.

    Returns:
        Planned locations; ``is_full`` is set when not every pallet fits.
    """
    output = command.execute(
        RecommendationInput(
            warehouse_id=request.warehouse_id,
            product_code=request.product_code,
            pallets_needed=request.pallets_needed,
            cartons=request.cartons,
        )
    )
    return _recommendation_to_schema(output)
