"""Value objects for warehouse cell addressing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .exceptions import CorruptLocationError


class PlacementPhase(str, Enum):
    """Search tier that produced a placement."""

    PRIMARY_HOME = "primary_home"
    IN_TRANSIT = "in_transit"
    MANUAL = "manual"


class StockStatus(str, Enum):
    """Status written with a stored pallet."""

    RELEASE = "release"
    RECEH = "receh"


class SessionState(str, Enum):
    """States of a single placement session."""

    PLANNING = "planning"
    VALIDATING = "validating"
    COMMITTING = "committing"
    COMMITTED = "committed"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Why a placement session ended in FAILED."""

    INSUFFICIENT_LOCATIONS = "insufficient_locations"
    CORRUPT_LOCATION = "corrupt_location"
    WRITE_ERROR = "write_error"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFIGURATION = "configuration"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class IntRange:
    """Inclusive integer range, e.g. lanes 1-4."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1:
            raise ValueError("Range start must be at least 1")
        if self.end < self.start:
            raise ValueError("Range end must not be before range start")

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.start <= value <= self.end

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __len__(self) -> int:
        return self.end - self.start + 1

    def clamp_end(self, limit: int) -> "IntRange | None":
        """Return this range with its end capped at ``limit``.

        Returns None when the capped range would be empty.
        """
        end = min(self.end, limit)
        if end < self.start:
            return None
        return IntRange(self.start, end)


_CLUSTER = r"(?P<cluster>[A-Za-z0-9]+)"
_ROW_PATTERN = re.compile(_CLUSTER + r"-L(?P<lane>\d+)-B(?P<row>\d+)$")
_CELL_PATTERN = re.compile(
    _CLUSTER + r"-L(?P<lane>\d+)-B(?P<row>\d+)-P(?P<level>\d+)$"
)


def _check_cluster(raw: object, parts: list[str]) -> None:
    if not parts or not parts[0] or parts[0].lower() in ("undefined", "null", "none"):
        raise CorruptLocationError(raw, "missing cluster component")


def _positive(raw: object, value: str, label: str) -> int:
    number = int(value)
    if number < 1:
        raise CorruptLocationError(raw, f"{label} must be at least 1")
    return number


@dataclass(frozen=True, order=True)
class RowAddress:
    """A (cluster, lane, row) position holding a stack of levels.

    Wire form is ``"A-L1-B2"``.
    """

    cluster: str
    lane: int
    row: int

    @classmethod
    def parse(cls, raw: object) -> "RowAddress":
        """Parse the wire form into a RowAddress.

        Raises:
            CorruptLocationError: If the value is not a well-formed address.
        """
        if not isinstance(raw, str):
            raise CorruptLocationError(raw, "location must be a string")
        text = raw.strip()
        _check_cluster(raw, text.split("-"))
        match = _ROW_PATTERN.match(text)
        if match is None:
            raise CorruptLocationError(raw, "expected format CLUSTER-L<n>-B<n>")
        return cls(
            cluster=match["cluster"],
            lane=_positive(raw, match["lane"], "lane"),
            row=_positive(raw, match["row"], "row"),
        )

    def at_level(self, level: int) -> "CellKey":
        return CellKey(self.cluster, self.lane, self.row, level)

    def __str__(self) -> str:
        return f"{self.cluster}-L{self.lane}-B{self.row}"


@dataclass(frozen=True, order=True)
class CellKey:
    """A single storage cell: (cluster, lane, row, level).

    Wire form is ``"A-L1-B2-P3"``. Parse once at the system boundary with
    :meth:`parse`; everything downstream works on this type.
    """

    cluster: str
    lane: int
    row: int
    level: int

    @classmethod
    def parse(cls, raw: object) -> "CellKey":
        """Parse the wire form into a CellKey.

        Raises:
            CorruptLocationError: If the value is not a well-formed cell key.

        Example:
            >>> CellKey.parse("A-L1-B2-P3")
            CellKey(cluster='A', lane=1, row=2, level=3)
        """
        if not isinstance(raw, str):
            raise CorruptLocationError(raw, "location must be a string")
        text = raw.strip()
        _check_cluster(raw, text.split("-"))
        match = _CELL_PATTERN.match(text)
        if match is None:
            raise CorruptLocationError(raw, "expected format CLUSTER-L<n>-B<n>-P<n>")
        return cls(
            cluster=match["cluster"],
            lane=_positive(raw, match["lane"], "lane"),
            row=_positive(raw, match["row"], "row"),
            level=_positive(raw, match["level"], "level"),
        )

    @property
    def address(self) -> RowAddress:
        return RowAddress(self.cluster, self.lane, self.row)

    @property
    def lane_label(self) -> str:
        return f"L{self.lane}"

    @property
    def row_label(self) -> str:
        return f"B{self.row}"

    @property
    def level_label(self) -> str:
        return f"P{self.level}"

    def __str__(self) -> str:
        return f"{self.cluster}-L{self.lane}-B{self.row}-P{self.level}"
