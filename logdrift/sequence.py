"""Numbering log lines with a monotonically increasing counter.

Each line gets a suffix such as `` [#42]``. The counter is shared by every
service handled by one Sequencer, so gaps and reordering across merged
streams can be spotted.
"""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import AsyncIterable, AsyncIterator

from logdrift.runner import LogLine

DEFAULT_PREFIX = "#"


class Sequencer:
    """Appends a global sequence tag to each line."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix or DEFAULT_PREFIX
        self._lock = threading.Lock()
        self._counter = 0

    def stamp(self, line: LogLine) -> LogLine:
        """Return ``line`` with the next sequence tag appended."""
        with self._lock:
            self._counter += 1
            number = self._counter
        return dataclasses.replace(line, text=f"{line.text} [{self.prefix}{number}]")

    async def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield every line of ``source`` stamped."""
        async for line in source:
            yield self.stamp(line)

    def reset(self) -> None:
        """Set the counter back to zero."""
        with self._lock:
            self._counter = 0

    def current(self) -> int:
        """Return the last number issued, or 0 if none has been."""
        with self._lock:
            return self._counter