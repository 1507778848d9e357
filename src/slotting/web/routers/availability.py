"""Location availability endpoints."""

from fastapi import APIRouter

from slotting.web.dependencies import AvailabilityCommandDep
from slotting.web.schemas.requests import AvailabilityRequest
from slotting.web.schemas.responses import AvailabilityResponse

router = APIRouter(prefix="/availability", tags=["availability"])


@router.post("", response_model=AvailabilityResponse)
def check_availability(
    request: AvailabilityRequest,
    command: AvailabilityCommandDep,
) -> AvailabilityResponse:
    """Check whether each location is still free before submitting."""
    output = command.execute(request.warehouse_id, request.locations)
    return AvailabilityResponse(
        success=output.success,
        locations=output.locations,
        all_available=output.all_available,
        error=output.error,
        reason=output.reason.value if output.reason else None,
    )
