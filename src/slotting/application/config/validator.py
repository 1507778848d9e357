"""Validation results and layout advisories for warehouse configurations.

Schema validation (types, ranges, references) happens in the pydantic
models. This module adds checks that need the resolved layout: homes that
can never receive a pallet, overlapping overrides whose precedence changes
allocation, and similar.
"""

from dataclasses import dataclass, field
from typing import Any

from slotting.application.config.adapter import config_to_layout
from slotting.application.config.schema import WarehouseConfiguration
from slotting.domain import CellOverride
from slotting.domain.exceptions import ConfigurationError
from slotting.domain.services import ConfigResolver


@dataclass
class ValidationIssue:
    """Blocking validation error.

    Attributes:
        path: JSON path of the offending entry (e.g. "homes[2].cluster")
        message: Human-readable description
        value: The offending value
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """Non-blocking advisory about the configuration."""

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Collected errors and warnings for one configuration."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """CLI exit code: 0 clean, 1 errors, 2 warnings only."""
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(self, path: str, message: str, value: Any = None) -> "ValidationResult":
        self.errors.append(ValidationIssue(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        self.warnings.append(
            ValidationWarning(path=path, message=message, suggestion=suggestion)
        )
        return self


def _ranges_overlap(a: CellOverride, b: CellOverride) -> bool:
    if a.lane_range.end < b.lane_range.start or b.lane_range.end < a.lane_range.start:
        return False
    if a.row_range is None or b.row_range is None:
        return True
    return not (
        a.row_range.end < b.row_range.start or b.row_range.end < a.row_range.start
    )


def check_overrides(config: WarehouseConfiguration) -> ValidationResult:
    """Warn where overlapping overrides set conflicting values."""
    result = ValidationResult()
    overrides = config_to_layout(config).overrides
    for i, first in enumerate(overrides):
        for j in range(i + 1, len(overrides)):
            second = overrides[j]
            if first.cluster_config_id != second.cluster_config_id:
                continue
            if not _ranges_overlap(first, second):
                continue
            conflicts = [
                name
                for name in ("custom_row_count", "custom_level_capacity")
                if getattr(first, name) is not None
                and getattr(second, name) is not None
                and getattr(first, name) != getattr(second, name)
            ]
            if conflicts:
                result.add_warning(
                    f"overrides[{j}]",
                    f"Overlaps overrides[{i}] with different {', '.join(conflicts)}",
                    suggestion="The most recently created override wins; "
                    "split the ranges to make intent explicit",
                )
    return result


def check_homes(config: WarehouseConfiguration) -> ValidationResult:
    """Check that every home can hold at least one pallet."""
    result = ValidationResult()
    layout = config_to_layout(config)
    resolver = ConfigResolver(layout.clusters, layout.overrides, strict=True)

    for index, home in enumerate(layout.homes):
        path = f"homes[{index}]"
        config_entry = resolver.cluster_config(home.cluster)
        if config_entry is None:
            if config.settings.strict_clusters:
                result.add_error(
                    f"{path}.cluster",
                    f"Cluster '{home.cluster}' has no active configuration",
                    home.cluster,
                )
            else:
                result.add_warning(
                    f"{path}.cluster",
                    f"Cluster '{home.cluster}' has no configuration; "
                    "fallback capacity will be used",
                )
            continue

        if home.lane_range.end > config_entry.default_lane_count:
            result.add_warning(
                f"{path}.lanes.end",
                f"Lane {home.lane_range.end} is beyond the "
                f"{config_entry.default_lane_count} lanes of cluster {home.cluster}",
            )

        usable_lanes = [
            lane
            for lane in home.lane_range
            if lane <= config_entry.default_lane_count
            and not resolver.is_transit_lane(home.cluster, lane)
            and home.row_range.start <= resolver.effective_row_count(home.cluster, lane)
        ]
        if not usable_lanes:
            result.add_warning(
                path,
                "Home can never receive a pallet: every lane is missing, "
                "a transit area or shorter than the row range",
                suggestion="Adjust the lane/row range or the overrides",
            )

    homed = {home.product_id for home in layout.homes}
    for index, product in enumerate(layout.products):
        if product.id not in homed:
            result.add_warning(
                f"products[{index}]",
                f"Product '{product.code}' has no home; it can only go to transit",
            )
        if product.default_cluster and product.default_cluster not in resolver.clusters:
            result.add_warning(
                f"products[{index}].default_cluster",
                f"Default cluster '{product.default_cluster}' is not configured",
            )
    return result


def validate_config(config: WarehouseConfiguration) -> ValidationResult:
    """Run all layout checks on an already schema-valid configuration."""
    result = ValidationResult()
    try:
        homes = check_homes(config)
    except ConfigurationError as e:
        return result.add_error("overrides", e.message)
    result.errors.extend(homes.errors)
    result.warnings.extend(homes.warnings)
    result.warnings.extend(check_overrides(config).warnings)
    return result
