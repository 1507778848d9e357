"""Application layer - use cases and orchestration."""

from .commands import (
    CheckAvailabilityCommand,
    CommitPlacementCommand,
    DescribeClusterQuery,
    RecommendPlacementCommand,
)
from .dtos import (
    AvailabilityOutput,
    ClusterLayoutOutput,
    CommitInput,
    CommitOutput,
    LaneCapacity,
    RecommendationInput,
    RecommendationOutput,
)
from .factory import ServiceFactory, get_factory

__all__ = [
    "AvailabilityOutput",
    "CheckAvailabilityCommand",
    "ClusterLayoutOutput",
    "CommitInput",
    "CommitOutput",
    "CommitPlacementCommand",
    "DescribeClusterQuery",
    "LaneCapacity",
    "RecommendPlacementCommand",
    "RecommendationInput",
    "RecommendationOutput",
    "ServiceFactory",
    "get_factory",
]
