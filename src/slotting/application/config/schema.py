"""Pydantic models for warehouse layout configuration files.

A configuration file describes one warehouse: its clusters and their
default capacities, cell overrides, products, product homes, optionally the
cells already occupied, and planner settings.
"""

from datetime import datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from slotting.domain.exceptions import CorruptLocationError
from slotting.domain.value_objects import CellKey

# Supported schema versions for configuration files
# Version 1.0: Clusters, overrides, products and homes
# Version 1.1: Added planner settings and initial occupancy
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})

CLUSTER_PATTERN = r"^[A-Za-z0-9]+$"


class RangeConfig(BaseModel):
    """Inclusive lane or row range."""

    model_config = ConfigDict(extra="forbid")

    start: int = Field(..., ge=1, description="First lane/row (1-based)")
    end: int = Field(..., ge=1, description="Last lane/row, inclusive")

    @model_validator(mode="after")
    def validate_order(self) -> "RangeConfig":
        """Validate that end is not before start."""
        if self.end < self.start:
            raise ValueError(
                f"end ({self.end}) must be greater than or equal to start ({self.start})"
            )
        return self


class ClusterConfigSchema(BaseModel):
    """Default capacity of one cluster.

    Attributes:
        cluster: Cluster letter (e.g. "A").
        id: Identifier referenced by overrides; defaults to the letter.
        default_lane_count: Lanes in the cluster.
        default_row_count: Rows per lane.
        default_level_capacity: Pallet levels per row.
        is_active: Inactive clusters are ignored.
    """

    model_config = ConfigDict(extra="forbid")

    cluster: str = Field(..., pattern=CLUSTER_PATTERN)
    id: str | None = None
    default_lane_count: int = Field(default=11, ge=1, le=200)
    default_row_count: int = Field(default=9, ge=1, le=200)
    default_level_capacity: int = Field(default=3, ge=1, le=20)
    description: str | None = None
    is_active: bool = True


class CellOverrideConfig(BaseModel):
    """Exception to a cluster's defaults.

    ``rows`` left out applies the override to every row of the lanes.
    """

    model_config = ConfigDict(extra="forbid")

    cluster: str = Field(..., description="Cluster letter or cluster config id")
    lanes: RangeConfig
    rows: RangeConfig | None = None
    custom_row_count: int | None = Field(default=None, ge=1, le=200)
    custom_level_capacity: int | None = Field(default=None, ge=1, le=20)
    is_transit_area: bool = False
    is_disabled: bool = False
    created_at: datetime | None = None
    notes: str | None = None


class ProductConfig(BaseModel):
    """Product master data relevant to placement."""

    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., min_length=1)
    id: str | None = None
    name: str = ""
    cartons_per_pallet: int = Field(..., ge=1)
    default_cluster: str | None = Field(default=None, pattern=CLUSTER_PATTERN)
    is_active: bool = True


class ProductHomeConfig(BaseModel):
    """Preferred zone of a product."""

    model_config = ConfigDict(extra="forbid")

    product: str = Field(..., description="Product code")
    cluster: str = Field(..., pattern=CLUSTER_PATTERN)
    lanes: RangeConfig
    rows: RangeConfig
    max_pallet_per_location: int = Field(default=3, ge=1, le=20)
    priority: int = Field(default=0, ge=0)
    is_active: bool = True


class PlannerSettings(BaseModel):
    """Tunables of the allocation core.

    Attributes:
        remainder_threshold: Largest carton remainder merged into the last
            full pallet.
        commit_spare_cells: Extra candidates planned for a commit so cells
            taken since planning can be skipped.
        session_timeout_seconds: Deadline of a whole commit session.
        strict_clusters: Reject lookups for clusters without configuration
            instead of falling back to 9 rows and 3 levels.
    """

    model_config = ConfigDict(extra="forbid")

    remainder_threshold: int = Field(default=5, ge=0)
    commit_spare_cells: int = Field(default=2, ge=0, le=100)
    session_timeout_seconds: float | None = Field(default=10.0, gt=0)
    strict_clusters: bool = True


class WarehouseConfiguration(BaseModel):
    """Root configuration model for one warehouse."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.1")
    warehouse_id: str = Field(..., min_length=1)
    clusters: list[ClusterConfigSchema] = Field(default_factory=list)
    overrides: list[CellOverrideConfig] = Field(default_factory=list)
    products: list[ProductConfig] = Field(default_factory=list)
    homes: list[ProductHomeConfig] = Field(default_factory=list)
    occupied: list[str] = Field(
        default_factory=list, description="Cells already holding stock, e.g. 'A-L1-B1-P1'"
    )
    settings: PlannerSettings = Field(default_factory=PlannerSettings)

    @field_validator("schema_version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate that the schema version is supported."""
        if v not in SUPPORTED_VERSIONS:
            supported = ", ".join(sorted(SUPPORTED_VERSIONS))
            raise ValueError(f"Unsupported schema version '{v}'. Supported: {supported}")
        return v

    @field_validator("occupied")
    @classmethod
    def validate_occupied(cls, v: list[str]) -> list[str]:
        """Validate that occupied cells are well-formed keys."""
        for raw in v:
            try:
                CellKey.parse(raw)
            except CorruptLocationError as e:
                raise ValueError(e.message) from e
        return v

    @model_validator(mode="after")
    def validate_references(self) -> "WarehouseConfiguration":
        """Validate cluster and product references."""
        letters = [c.cluster for c in self.clusters]
        duplicates = sorted({c for c in letters if letters.count(c) > 1})
        if duplicates:
            raise ValueError(f"Duplicate cluster(s): {', '.join(duplicates)}")

        cluster_refs = set(letters) | {c.id for c in self.clusters if c.id}
        for override in self.overrides:
            if override.cluster not in cluster_refs:
                raise ValueError(
                    f"Override references unknown cluster '{override.cluster}'"
                )

        codes = {p.code for p in self.products}
        if len(codes) != len(self.products):
            raise ValueError("Product codes must be unique")
        for home in self.homes:
            if home.product not in codes:
                raise ValueError(f"Home references unknown product '{home.product}'")
        return self
