"""Dropping over-repeated identical log lines.

Occurrences are counted rather than timed: once the same line has been seen
``max_reps`` times in a row for a service, further copies are dropped until a
different line arrives for that service.
"""

from __future__ import annotations

import threading
from collections.abc import AsyncIterable, AsyncIterator

from logdrift.runner import LogLine


class Suppressor:
    """Tracks consecutive repetitions of lines per service."""

    def __init__(self, max_reps: int) -> None:
        if max_reps < 1:
            raise ValueError("suppress: max_reps must be >= 1")
        self.max_reps = max_reps
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}
        self._last: dict[str, str] = {}

    def allow(self, line: LogLine) -> bool:
        """Report whether ``line`` should be forwarded."""
        with self._lock:
            if self._last.get(line.service, "") != line.text:
                self._last[line.service] = line.text
                self._counts[line.service] = 1
                return True
            count = self._counts.get(line.service, 0) + 1
            self._counts[line.service] = count
            return count <= self.max_reps


async def apply(
    suppressor: Suppressor, source: AsyncIterable[LogLine]
) -> AsyncIterator[LogLine]:
    """Yield the lines of ``source`` that ``suppressor`` allows."""
    async for line in source:
        if suppressor.allow(line):
            yield line