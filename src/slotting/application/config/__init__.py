"""Configuration schema and loading for warehouse layouts.

A warehouse configuration is a JSON file describing clusters, cell
overrides, products and their homes. This package validates it with
pydantic models, reports loading problems as ConfigError and converts the
result into domain objects.

Public API:
    - WarehouseConfiguration: Root configuration model
    - load_config / load_config_from_dict: Load and validate
    - ConfigError: Exception for loading failures
    - validate_config: Layout advisories on a loaded configuration
    - config_to_layout / config_to_catalog / config_to_occupied: Adapters

Example:
    >>> from pathlib import Path
    >>> from slotting.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("warehouse.json"))
    ...     print(f"Clusters: {[c.cluster for c in config.clusters]}")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from slotting.application.config.adapter import (
    config_to_catalog,
    config_to_homes,
    config_to_layout,
    config_to_occupied,
    config_to_overrides,
    config_to_products,
)
from slotting.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from slotting.application.config.schema import (
    SUPPORTED_VERSIONS,
    CellOverrideConfig,
    ClusterConfigSchema,
    PlannerSettings,
    ProductConfig,
    ProductHomeConfig,
    RangeConfig,
    WarehouseConfiguration,
)
from slotting.application.config.validator import (
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
    validate_config,
)

__all__ = [
    # Schema
    "CellOverrideConfig",
    "ClusterConfigSchema",
    "PlannerSettings",
    "ProductConfig",
    "ProductHomeConfig",
    "RangeConfig",
    "SUPPORTED_VERSIONS",
    "WarehouseConfiguration",
    # Loading
    "ConfigError",
    "load_config",
    "load_config_from_dict",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    "ValidationWarning",
    "validate_config",
    # Adapters
    "config_to_catalog",
    "config_to_homes",
    "config_to_layout",
    "config_to_occupied",
    "config_to_overrides",
    "config_to_products",
]
