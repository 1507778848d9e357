"""Pydantic response schemas for the REST API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from slotting.web.schemas.common import LocationSchema


class RecommendationResponse(BaseModel):
    """Response for a placement recommendation."""

    success: bool = Field(..., description="Whether the request was accepted")
    locations: list[LocationSchema] = Field(
        default_factory=list, description="Planned cells, home before transit"
    )
    total_found: int = Field(default=0, description="Number of planned cells")
    remaining_pallets: int = Field(
        default=0, description="Pallets that found no cell"
    )
    is_full: bool = Field(default=False, description="Whether the warehouse ran out")
    timestamp: datetime = Field(..., description="When the plan was computed")
    error: str | None = Field(default=None, description="Error message")
    reason: str | None = Field(default=None, description="Failure category")


class CommitResponse(BaseModel):
    """Response for a placement commit."""

    success: bool = Field(..., description="Whether the session committed")
    message: str = Field(..., description="Outcome message")
    state: str = Field(..., description="Terminal session state")
    transaction_code: str | None = Field(
        default=None, description="Transaction code, INB-YYYYMMDD-NNNN"
    )
    reason: str | None = Field(default=None, description="Failure category")
    locations: list[LocationSchema] = Field(
        default_factory=list, description="Cells written"
    )
    occupied: list[str] = Field(
        default_factory=list, description="Planned cells taken since planning"
    )
    remaining_pallets: int = Field(
        default=0, description="Pallets that could not be committed"
    )
    rolled_back: bool | None = Field(
        default=None, description="For write errors, whether earlier writes were undone"
    )


class AvailabilityResponse(BaseModel):
    """Response for an availability check."""

    success: bool = Field(..., description="Whether the locations could be checked")
    locations: dict[str, bool] = Field(
        default_factory=dict, description="Location to free flag, in request order"
    )
    all_available: bool = Field(default=False, description="Whether every cell is free")
    error: str | None = Field(default=None, description="Error message")
    reason: str | None = Field(default=None, description="Failure category")


class LaneCapacitySchema(BaseModel):
    """Effective capacity of one lane."""

    lane: str = Field(..., description="Lane label, e.g. 'L5'")
    row_count: int = Field(..., description="Effective number of rows")
    level_capacities: list[int] = Field(..., description="Levels per row, row 1 first")
    disabled_rows: list[str] = Field(
        default_factory=list, description="Labels of disabled rows, e.g. 'B3'"
    )
    is_transit: bool = Field(default=False, description="Lane is a transit area")
    total_cells: int = Field(..., description="Usable cells in the lane")


class ClusterLayoutResponse(BaseModel):
    """Response for a cluster layout query."""

    warehouse_id: str = Field(..., description="Warehouse id")
    cluster: str = Field(..., description="Cluster letter")
    lanes: list[LaneCapacitySchema] = Field(default_factory=list)
    total_cells: int = Field(..., description="Usable cells in the cluster")


class ValidationResultSchema(BaseModel):
    """Response for configuration validation."""

    is_valid: bool = Field(..., description="Whether configuration is valid")
    errors: list[dict[str, Any]] = Field(
        default_factory=list, description="Validation errors"
    )
    warnings: list[dict[str, Any]] = Field(
        default_factory=list, description="Validation warnings"
    )


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )
