"""Common Pydantic schemas shared across requests and responses."""

from enum import Enum

from pydantic import BaseModel, Field

from slotting.domain import Placement


class PhaseEnum(str, Enum):
    """Search tier that produced a location."""

    PRIMARY_HOME = "primary_home"
    IN_TRANSIT = "in_transit"
    MANUAL = "manual"


class StatusEnum(str, Enum):
    """Stock status written with a pallet."""

    RELEASE = "release"
    RECEH = "receh"


class LocationSchema(BaseModel):
    """One cell assignment in wire format."""

    location: str = Field(..., description="Full cell key, e.g. 'A-L1-B2-P3'")
    cluster: str = Field(..., description="Cluster letter")
    lane: str = Field(..., description="Lane label, e.g. 'L1'")
    row: str = Field(..., description="Row label, e.g. 'B2'")
    level: str = Field(..., description="Level label, e.g. 'P3'")
    phase: PhaseEnum = Field(..., description="Search tier")
    carton_qty: int = Field(default=0, description="Cartons on this pallet")
    is_partial: bool = Field(default=False, description="Partial (receh) pallet")
    status: StatusEnum = Field(default=StatusEnum.RELEASE, description="Stock status")

    @classmethod
    def from_placement(cls, placement: Placement) -> "LocationSchema":
        key = placement.key
        return cls(
            location=str(key),
            cluster=key.cluster,
            lane=key.lane_label,
            row=key.row_label,
            level=key.level_label,
            phase=PhaseEnum(placement.phase.value),
            carton_qty=placement.carton_qty,
            is_partial=placement.is_partial,
            status=StatusEnum(placement.status.value),
        )
