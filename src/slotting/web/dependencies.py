"""FastAPI dependency injection for slotting services."""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from slotting.application.commands import (
    CheckAvailabilityCommand,
    CommitPlacementCommand,
    DescribeClusterQuery,
    RecommendPlacementCommand,
)
from slotting.application.factory import ServiceFactory, get_factory

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SLOTTING_CONFIG"


@lru_cache(maxsize=1)
def get_service_factory() -> ServiceFactory:
    """Get cached ServiceFactory instance.

    Loads the warehouse configuration named by ``SLOTTING_CONFIG``; without
    it the default (empty) factory is served.
    """
    config_path = os.environ.get(CONFIG_ENV_VAR)
    if config_path:
        logger.info(f"Loading warehouse configuration from {config_path}")
        return ServiceFactory.from_path(Path(config_path))
    return get_factory()


def get_recommend_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> RecommendPlacementCommand:
    """Dependency for RecommendPlacementCommand."""
    return factory.create_recommend_command()


def get_commit_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> CommitPlacementCommand:
    """Dependency for CommitPlacementCommand."""
    return factory.create_commit_command()


def get_availability_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> CheckAvailabilityCommand:
    return factory.create_availability_command()


def get_layout_query(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> DescribeClusterQuery:
    return factory.create_layout_query()


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
RecommendCommandDep = Annotated[
    RecommendPlacementCommand, Depends(get_recommend_command)
]
CommitCommandDep = Annotated[CommitPlacementCommand, Depends(get_commit_command)]
AvailabilityCommandDep = Annotated[
    CheckAvailabilityCommand, Depends(get_availability_command)
]
LayoutQueryDep = Annotated[DescribeClusterQuery, Depends(get_layout_query)]
