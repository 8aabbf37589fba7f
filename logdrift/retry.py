"""Retrying a log line source that ends unexpectedly.

When the source stream ends while the consumer is still reading, the factory
is called again, up to ``max_attempts`` streams in total, waiting ``delay``
seconds between them. Useful for commands that crash and must be restarted,
or tailed files that briefly disappear during rotation.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable

from logdrift.runner import LogLine

Factory = Callable[[], "AsyncIterable[LogLine] | Awaitable[AsyncIterable[LogLine]]"]


async def _open(factory: Factory) -> AsyncIterable[LogLine]:
    source = factory()
    if inspect.isawaitable(source):
        source = await source
    return source


class Retryer:
    """Re-opens a source through its factory whenever it ends."""

    def __init__(self, max_attempts: int, delay: float = 0.0) -> None:
        if max_attempts < 1:
            raise ValueError("retry: max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.delay = max(0.0, delay)

    async def apply(self, factory: Factory) -> AsyncIterator[LogLine]:
        """Open the first source and return a stream that retries on its end.

        An error from the first call of ``factory`` is raised here; errors
        from later calls end the stream.
        """
        first = await _open(factory)
        return self._stream(first, factory)

    async def _stream(
        self, source: AsyncIterable[LogLine], factory: Factory
    ) -> AsyncIterator[LogLine]:
        attempts = 0
        while True:
            async for line in source:
                yield line
            attempts += 1
            if attempts >= self.max_attempts:
                return
            await asyncio.sleep(self.delay)
            try:
                source = await _open(factory)
            except Exception:
                return