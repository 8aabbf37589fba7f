"""Stamping log lines with a cumulative per-service byte offset."""

import threading
from collections import defaultdict
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import replace

from logdrift.runner import LogLine

DEFAULT_FORMAT = "[%010d] %s"


class Stamper:
    """Tracks cumulative byte offsets per service and prepends them to lines.

    ``fmt`` is a %-style template taking the offset (``%d``) and the original
    text (``%s``), for example ``"[%010d] %s"``.
    """

    def __init__(self, fmt: str = "") -> None:
        self.format = fmt or DEFAULT_FORMAT
        self._lock = threading.Lock()
        self._offsets: defaultdict[str, int] = defaultdict(int)

    def stamp(self, line: LogLine) -> LogLine:
        """Return ``line`` with its offset prepended, and advance the offset.

        The offset grows by the UTF-8 length of the text plus one newline.
        """
        with self._lock:
            current = self._offsets[line.service]
            self._offsets[line.service] = current + len(line.text.encode("utf-8")) + 1
        return replace(line, text=self.format % (current, line.text))

    def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Return a stream of every line of ``source`` stamped."""
        return (self.stamp(line) async for line in source)

    def current(self, service: str) -> int:
        """Return the current byte offset for ``service``."""
        with self._lock:
            return self._offsets.get(service, 0)

    def reset(self, service: str) -> None:
        """Set the byte offset for ``service`` back to zero."""
        with self._lock:
            self._offsets[service] = 0