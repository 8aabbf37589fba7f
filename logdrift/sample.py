"""Periodic sampling of log lines.

One line out of every ``n`` received is forwarded, counted separately for
each service, so that high-volume streams are thinned before they reach
later stages.
"""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import AsyncIterable, AsyncIterator

from logdrift.runner import LogLine


class Sampler:
    """Forwards every ``n``-th line of each service."""

    def __init__(self, n: int) -> None:
        if n < 1:
            raise ValueError(f"sample: n must be >= 1, got {n}")
        self.n = n
        self._lock = threading.Lock()
        self._counters: Counter[str] = Counter()

    def _keep(self, service: str) -> bool:
        with self._lock:
            self._counters[service] += 1
            return self._counters[service] % self.n == 0

    async def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield every ``n``-th line of ``source`` per service."""
        async for line in source:
            if self._keep(line.service):
                yield line