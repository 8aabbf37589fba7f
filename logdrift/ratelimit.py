"""Rate limiting of log line streams.

A rate of zero means unlimited; a positive rate is a number of lines per
second.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator

from logdrift.runner import LogLine


class _Ticker:
    """Periodic ticks on the running loop; at most one missed tick is kept."""

    def __init__(self, interval: float) -> None:
        self._loop = asyncio.get_running_loop()
        self._interval = interval
        self._start = self._loop.time()
        self._taken = 0

    async def tick(self) -> None:
        elapsed = self._loop.time() - self._start
        due = int(elapsed // self._interval)
        if due > self._taken:
            self._taken = due
            return
        self._taken += 1
        target = self._start + self._taken * self._interval
        await asyncio.sleep(max(0.0, target - self._loop.time()))


class Limiter:
    """Caps the number of lines forwarded per second."""

    def __init__(self, lines_per_sec: int = 0) -> None:
        if lines_per_sec < 0:
            raise ValueError(
                f"ratelimit: lines_per_sec must be >= 0, got {lines_per_sec}"
            )
        self.lines_per_sec = lines_per_sec

    async def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield lines of ``source`` no faster than the configured rate."""
        if self.lines_per_sec == 0:
            async for line in source:
                yield line
            return
        ticker = _Ticker(1.0 / self.lines_per_sec)
        async for line in source:
            await ticker.tick()
            yield line