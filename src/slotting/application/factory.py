"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slotting.application.commands import (
        CheckAvailabilityCommand,
        CommitPlacementCommand,
        DescribeClusterQuery,
        RecommendPlacementCommand,
    )
    from slotting.application.config.schema import (
        PlannerSettings,
        WarehouseConfiguration,
    )
    from slotting.contracts.protocols import (
        LockProvider,
        OccupancyRepository,
        TransactionLog,
        WarehouseCatalog,
    )
    from slotting.infrastructure.formatters import (
        ClusterMapFormatter,
        PlacementPlanFormatter,
    )


@dataclass
class ServiceFactory:
    """Factory for stores and commands.

    Without a configuration the factory serves an empty warehouse backed by
    in-memory stores. Stores are created lazily and shared by every command
    the factory creates, so commits made through one command are visible to
    the others.

    Example:
        ```python
        factory = ServiceFactory.from_path(Path("warehouse.json"))
        command = factory.create_recommend_command()
        output = command.execute(RecommendationInput("WH-01", "SKU-1", 4))
        ```
    """

    config: "WarehouseConfiguration | None" = None

    _catalog: "WarehouseCatalog | None" = field(default=None, init=False, repr=False)
    _repository: "OccupancyRepository | None" = field(
        default=None, init=False, repr=False
    )
    _transactions: "TransactionLog | None" = field(default=None, init=False, repr=False)
    _locks: "LockProvider | None" = field(default=None, init=False, repr=False)

    @classmethod
    def from_path(cls, path: Path) -> "ServiceFactory":
        """Load a configuration file and build a factory around it.

        Raises:
            ConfigError: If the file cannot be loaded.
        """
        from slotting.application.config import load_config

        return cls(config=load_config(path))

    @property
    def warehouse_id(self) -> str | None:
        return self.config.warehouse_id if self.config else None

    @property
    def settings(self) -> "PlannerSettings":
        from slotting.application.config.schema import PlannerSettings

        return self.config.settings if self.config else PlannerSettings()

    def get_catalog(self) -> "WarehouseCatalog":
        """Get or create the configuration catalog."""
        if self._catalog is None:
            from slotting.application.config import config_to_catalog
            from slotting.infrastructure.memory import InMemoryCatalog

            self._catalog = (
                config_to_catalog(self.config) if self.config else InMemoryCatalog()
            )
        return self._catalog

    def get_repository(self) -> "OccupancyRepository":
        """Get or create the occupancy store, seeded with configured stock."""
        if self._repository is None:
            from slotting.application.config import config_to_occupied
            from slotting.infrastructure.memory import InMemoryOccupancyStore

            store = InMemoryOccupancyStore()
            if self.config and self.config.occupied:
                store.seed(self.config.warehouse_id, config_to_occupied(self.config))
            self._repository = store
        return self._repository

    def get_transaction_log(self) -> "TransactionLog":
        """Get or create the transaction log."""
        if self._transactions is None:
            from slotting.infrastructure.memory import InMemoryTransactionLog

            self._transactions = InMemoryTransactionLog()
        return self._transactions

    def get_locks(self) -> "LockProvider":
        """Get or create the per-cluster lock registry."""
        if self._locks is None:
            from slotting.infrastructure.locks import ClusterLockRegistry

            self._locks = ClusterLockRegistry()
        return self._locks

    def get_plan_formatter(self) -> "PlacementPlanFormatter":
        from slotting.infrastructure.formatters import PlacementPlanFormatter

        return PlacementPlanFormatter()

    def get_cluster_map_formatter(self) -> "ClusterMapFormatter":
        from slotting.infrastructure.formatters import ClusterMapFormatter

        return ClusterMapFormatter()

    def create_recommend_command(self) -> "RecommendPlacementCommand":
        from slotting.application.commands import RecommendPlacementCommand

        return RecommendPlacementCommand(
            catalog=self.get_catalog(),
            repository=self.get_repository(),
            settings=self.settings,
        )

    def create_commit_command(self) -> "CommitPlacementCommand":
        """Create CommitPlacementCommand with shared stores and locks."""
        from slotting.application.commands import CommitPlacementCommand

        return CommitPlacementCommand(
            catalog=self.get_catalog(),
            repository=self.get_repository(),
            transactions=self.get_transaction_log(),
            locks=self.get_locks(),
            settings=self.settings,
        )

    def create_availability_command(self) -> "CheckAvailabilityCommand":
        from slotting.application.commands import CheckAvailabilityCommand

        return CheckAvailabilityCommand(self.get_repository())

    def create_layout_query(self) -> "DescribeClusterQuery":
        from slotting.application.commands import DescribeClusterQuery

        return DescribeClusterQuery(self.get_catalog(), settings=self.settings)


# Default factory instance
_default_factory: ServiceFactory | None = None


def get_factory() -> ServiceFactory:
    """Get the default service factory."""
    global _default_factory
    if _default_factory is None:
        _default_factory = ServiceFactory()
    return _default_factory


def set_factory(factory: ServiceFactory | None) -> None:
    """Set a custom factory (for testing)."""
    global _default_factory
    _default_factory = factory


def reset_factory() -> None:
    """Reset the factory to default (for testing cleanup)."""
    global _default_factory
    _default_factory = None
