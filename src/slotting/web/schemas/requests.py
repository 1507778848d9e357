"""Pydantic request schemas for the REST API."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field


class RecommendationRequest(BaseModel):
    """Request for a read-only placement recommendation.

    Give either ``pallets_needed`` or ``cartons``.
    """

    warehouse_id: str = Field(..., min_length=1, description="Warehouse id")
    product_code: str = Field(..., min_length=1, description="Product code")
    pallets_needed: int | None = Field(default=None, description="Pallets to place")
    cartons: int | None = Field(
        default=None, description="Carton quantity, converted into pallets"
    )


class CommitRequest(BaseModel):
    """Request for committing a placement.

    Without ``planned_locations`` or ``manual_locations`` a fresh plan is
    computed and committed.
    """

    warehouse_id: str = Field(..., min_length=1, description="Warehouse id")
    product_code: str = Field(..., min_length=1, description="Product code")
    pallets_needed: int | None = Field(default=None, description="Pallets to place")
    cartons: int | None = Field(default=None, description="Carton quantity")
    batch_code: str = Field(..., description="Batch code, YYMMDDXXXX")
    expiry_date: date | None = Field(
        default=None, description="Expiry date; derived from the batch code if omitted"
    )
    planned_locations: list[str] | None = Field(
        default=None, description="Cells from an earlier recommendation, 'A-L1-B2-P3'"
    )
    manual_locations: list[str] | None = Field(
        default=None, description="Row addresses chosen by the operator, 'A-L1-B2'"
    )


class AvailabilityRequest(BaseModel):
    """Request for checking whether cells are still free."""

    warehouse_id: str = Field(..., min_length=1, description="Warehouse id")
    locations: list[str] = Field(
        ..., min_length=1, description="Cells to check, 'A-L1-B2-P3'"
    )


class ConfigValidateRequest(BaseModel):
    """Request for validating a warehouse configuration."""

    config: dict[str, Any] = Field(..., description="Warehouse configuration JSON")
