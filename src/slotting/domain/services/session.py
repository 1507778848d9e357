"""Placement session state machine and deadline."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from ..exceptions import SessionStateError, SessionTimeoutError
from ..value_objects import FailureReason, SessionState

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.PLANNING: frozenset({SessionState.VALIDATING, SessionState.FAILED}),
    SessionState.VALIDATING: frozenset({SessionState.COMMITTING, SessionState.FAILED}),
    SessionState.COMMITTING: frozenset({SessionState.COMMITTED, SessionState.FAILED}),
    SessionState.COMMITTED: frozenset(),
    SessionState.FAILED: frozenset(),
}


class Deadline:
    """Wall-clock budget for a whole session."""

    def __init__(
        self, seconds: float | None, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.seconds = seconds
        self._clock = clock
        self._expires = None if seconds is None else clock() + seconds

    def remaining(self) -> float | None:
        """Seconds left, or None when unbounded."""
        if self._expires is None:
            return None
        return max(self._expires - self._clock(), 0.0)

    @property
    def expired(self) -> bool:
        return self._expires is not None and self._clock() >= self._expires

    def check(self, stage: str) -> None:
        """Raise SessionTimeoutError if the budget is spent."""
        if self.expired:
            raise SessionTimeoutError(
                f"Placement session exceeded {self.seconds}s deadline during {stage}"
            )


@dataclass
class PlacementSession:
    """One placement attempt from planning to a terminal state.

    A FAILED session is terminal; retrying means starting a new session with
    a fresh snapshot.
    """

    warehouse_id: str
    product_code: str
    state: SessionState = SessionState.PLANNING
    failure_reason: FailureReason | None = None
    history: list[SessionState] = field(default_factory=lambda: [SessionState.PLANNING])

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.state]

    def advance(self, target: SessionState) -> None:
        """Move to ``target``, enforcing the allowed transitions."""
        if target is SessionState.FAILED:
            raise SessionStateError("Use fail() to move a session to FAILED")
        self._move(target)

    def fail(self, reason: FailureReason) -> None:
        self._move(SessionState.FAILED)
        self.failure_reason = reason
        logger.warning(
            f"Placement session for {self.product_code} in {self.warehouse_id} "
            f"failed: {reason.value}"
        )

    def _move(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise SessionStateError(
                f"Cannot move placement session from {self.state.value} to {target.value}"
            )
        self.state = target
        self.history.append(target)
