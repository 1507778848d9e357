"""Placement commit endpoints."""

from fastapi import APIRouter

from slotting.application.dtos import CommitInput, CommitOutput
from slotting.web.dependencies import CommitCommandDep
from slotting.web.schemas.common import LocationSchema
from slotting.web.schemas.requests import CommitRequest
from slotting.web.schemas.responses import CommitResponse

router = APIRouter(prefix="/commits", tags=["commits"])


def _commit_to_schema(output: CommitOutput) -> CommitResponse:
    return CommitResponse(
        success=output.success,
        message=output.message,
        state=output.state.value,
        transaction_code=output.transaction_code,
        reason=output.reason.value if output.reason else None,
        locations=[LocationSchema.from_placement(p) for p in output.placements],
        occupied=[str(key) for key in output.occupied],
        remaining_pallets=output.remaining_unplaced,
        rolled_back=output.rolled_back,
    )


@router.post("", response_model=CommitResponse)
def commit_placement(
    request: CommitRequest,
    command: CommitCommandDep,
) -> CommitResponse:
    """Run one placement session and store the pallets.

    Failures (occupied cells, corrupt locations, write errors, timeouts)
    come back as ``success: false`` with a ``reason``, not as HTTP errors.
    """
    output = command.execute(
        CommitInput(
            warehouse_id=request.warehouse_id,
            product_code=request.product_code,
            pallets_needed=request.pallets_needed,
            cartons=request.cartons,
            batch_code=request.batch_code,
            expiry_date=request.expiry_date,
            planned_locations=request.planned_locations,
            manual_locations=request.manual_locations,
        )
    )
    return _commit_to_schema(output)
