"""Pydantic schemas for the REST API."""

from slotting.web.schemas.common import LocationSchema, PhaseEnum, StatusEnum
from slotting.web.schemas.requests import (
    AvailabilityRequest,
    CommitRequest,
    ConfigValidateRequest,
    RecommendationRequest,
)
from slotting.web.schemas.responses import (
    AvailabilityResponse,
    ClusterLayoutResponse,
    CommitResponse,
    ErrorResponseSchema,
    LaneCapacitySchema,
    RecommendationResponse,
    ValidationResultSchema,
)

__all__ = [
    # Common
    "LocationSchema",
    "PhaseEnum",
    "StatusEnum",
    # Requests
    "AvailabilityRequest",
    "CommitRequest",
    "ConfigValidateRequest",
    "RecommendationRequest",
    # Responses
    "AvailabilityResponse",
    "ClusterLayoutResponse",
    "CommitResponse",
    "ErrorResponseSchema",
    "LaneCapacitySchema",
    "RecommendationResponse",
    "ValidationResultSchema",
]
