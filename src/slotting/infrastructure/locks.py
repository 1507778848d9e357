"""Per-(warehouse, cluster) mutual exclusion for commits."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Iterable, Iterator

from slotting.domain.exceptions import SessionTimeoutError

logger = logging.getLogger(__name__)


class ClusterLockRegistry:
    """Hands out one lock per (warehouse, cluster).

    Locks for several clusters are always acquired in sorted order, so two
    sessions touching overlapping clusters cannot deadlock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, str], threading.Lock] = {}

    def _lock_for(self, warehouse_id: str, cluster: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault((warehouse_id, cluster), threading.Lock())

    @contextmanager
    def hold(
        self,
        warehouse_id: str,
        clusters: Iterable[str],
        timeout: float | None = None,
    ) -> Iterator[None]:
        """Hold the locks of ``clusters`` for the duration of the block.

        Raises:
            SessionTimeoutError: If all locks cannot be acquired within
                ``timeout`` seconds.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        acquired: list[threading.Lock] = []
        try:
            for cluster in sorted(set(clusters)):
                lock = self._lock_for(warehouse_id, cluster)
                if deadline is None:
                    lock.acquire()
                else:
                    remaining = max(deadline - time.monotonic(), 0.0)
                    if not lock.acquire(timeout=remaining):
                        raise SessionTimeoutError(
                            f"Timed out waiting for cluster {cluster} "
                            f"in warehouse {warehouse_id}"
                        )
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
