"""Exceptions raised by the allocation core.

All of these are caught at the session boundary (see
``slotting.application.commands``) and turned into structured results, so
callers of the commands never see them directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .value_objects import CellKey


class AllocationError(Exception):
    """Base class for slot allocation failures."""

    error_type = "allocation"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AllocationError):
    """Raised for missing or invalid input, before any I/O happens."""

    error_type = "validation"


class NotFoundError(AllocationError):
    """Raised when a referenced product does not exist."""

    error_type = "not_found"

    def __init__(self, message: str, identifier: str | None = None) -> None:
        self.identifier = identifier
        super().__init__(message)


class ConfigurationError(AllocationError):
    """Raised when warehouse configuration is missing or inconsistent."""

    error_type = "configuration"


class CorruptLocationError(AllocationError):
    """Raised when a location identifier fails structural parsing."""

    error_type = "corrupt_location"

    def __init__(self, raw: object, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"Corrupt location {raw!r}: {reason}")


class InsufficientCapacityError(AllocationError):
    """Raised when fewer free cells exist than a commit requires.

    Attributes:
        required: Number of cells the commit needed.
        available: Number of cells still free at commit time.
        occupied: Planned cells that were found occupied.
    """

    error_type = "insufficient_locations"

    def __init__(
        self,
        required: int,
        available: int,
        occupied: "list[CellKey] | None" = None,
        message: str | None = None,
    ) -> None:
        self.required = required
        self.available = available
        self.occupied = list(occupied or [])
        if message is None:
            message = f"Need {required} location(s) but only {available} still free"
            if self.occupied:
                taken = ", ".join(str(key) for key in self.occupied)
                message += f"; just occupied: {taken}"
        super().__init__(message)

    @property
    def shortfall(self) -> int:
        """Number of cells missing to satisfy the commit."""
        return max(self.required - self.available, 0)


class WriteError(AllocationError):
    """Raised when writing a single cell fails at the storage layer.

    Attributes:
        key: The cell whose write failed.
        rolled_back: Whether cells written earlier in the same commit were
            removed again.
    """

    error_type = "write_error"

    def __init__(
        self, key: "CellKey", message: str, rolled_back: bool = False
    ) -> None:
        self.key = key
        self.rolled_back = rolled_back
        super().__init__(message)


class SessionTimeoutError(AllocationError):
    """Raised when a placement session exceeds its deadline."""

    error_type = "timeout"


class SessionStateError(AllocationError):
    """Raised on an illegal placement session state transition."""

    error_type = "session_state"


class StorageError(Exception):
    """Raised by an occupancy store when a read or write cannot be performed."""


class DuplicateCellError(StorageError):
    """Raised by a store when a cell is written while already occupied."""

    def __init__(self, key: "CellKey") -> None:
        self.key = key
        super().__init__(f"Cell already occupied: {key}")
