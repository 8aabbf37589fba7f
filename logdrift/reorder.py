"""Reordering log lines by embedded timestamp.

Lines are held for a short window and then emitted sorted by timestamp, so
slightly out-of-order lines from different services arrive in order.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator, Callable
from datetime import datetime, timezone

from logdrift.runner import LogLine

_END = object()

Extractor = Callable[[str], "datetime | None"]


async def _pump(source: AsyncIterable[LogLine], queue: asyncio.Queue) -> None:
    try:
        async for line in source:
            await queue.put(line)
    except Exception as exc:
        await queue.put(exc)
    else:
        await queue.put(_END)


class Reorderer:
    """Buffers lines for a window and emits them in timestamp order.

    ``extract`` is called on each line's text and returns its timestamp, or
    None, in which case the arrival time is used.
    """

    def __init__(self, window: float, extract: Extractor | None) -> None:
        if window <= 0:
            raise ValueError("reorder: window must be positive")
        if extract is None:
            raise ValueError("reorder: extract function must not be None")
        self.window = window
        self.extract = extract

    def _stamp(self, line: LogLine) -> float:
        at = self.extract(line.text)
        if at is None:
            at = datetime.now(timezone.utc)
        return at.timestamp()

    async def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield lines of ``source`` sorted by timestamp within each window."""
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        pump = asyncio.create_task(_pump(source, queue))
        buffer: list[tuple[float, LogLine]] = []
        deadline = loop.time() + self.window

        def drain() -> list[LogLine]:
            ordered = [line for _, line in sorted(buffer, key=lambda pair: pair[0])]
            buffer.clear()
            return ordered

        try:
            while True:
                try:
                    item = await asyncio.wait_for(
                        queue.get(), max(0.0, deadline - loop.time())
                    )
                except TimeoutError:
                    for line in drain():
                        yield line
                    deadline = loop.time() + self.window
                    continue
                if item is _END:
                    for line in drain():
                        yield line
                    return
                if isinstance(item, Exception):
                    raise item
                buffer.append((self._stamp(item), item))
        finally:
            pump.cancel()
            await asyncio.gather(pump, return_exceptions=True)