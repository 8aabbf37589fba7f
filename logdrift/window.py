"""A per-service sliding time-window counter.

Record each observed line with :meth:`Window.add` and ask how many arrived
within the window with :meth:`Window.count`. All methods are thread-safe.
"""

from __future__ import annotations

import threading
from collections import deque
from datetime import datetime, timedelta


class Window:
    """Counts log lines per service within a rolling duration.

    ``size`` is a timedelta or a number of seconds.
    """

    def __init__(self, size: timedelta | float) -> None:
        if not isinstance(size, timedelta):
            size = timedelta(seconds=size)
        if size <= timedelta(0):
            raise ValueError("window: size must be positive")
        self.size = size
        self._lock = threading.Lock()
        self._buckets: dict[str, deque[datetime]] = {}

    def add(self, service: str, at: datetime) -> None:
        """Record a line for ``service`` observed at ``at``."""
        with self._lock:
            self._buckets.setdefault(service, deque()).append(at)
            self._evict(service, at)

    def count(self, service: str, now: datetime) -> int:
        """Return how many lines ``service`` had in the window ending at ``now``."""
        with self._lock:
            self._evict(service, now)
            return len(self._buckets.get(service, ()))

    def services(self) -> list[str]:
        """Return the names of all services seen."""
        with self._lock:
            return list(self._buckets)

    def _evict(self, service: str, now: datetime) -> None:
        entries = self._buckets.get(service)
        if entries is None:
            return
        cutoff = now - self.size
        while entries and entries[0] < cutoff:
            entries.popleft()