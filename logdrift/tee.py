"""Duplicating one log line stream into two.

Both outputs receive every line of the source in order; a line is handed to
the first output and then to the second, so a slow reader holds both back.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable

from logdrift.runner import LogLine

_END = object()


class _Hub:
    def __init__(self, source: AsyncIterable[LogLine]) -> None:
        self._source = source
        self._task: asyncio.Task | None = None
        self.branches: list[_Branch] = []

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._pump())

    async def _deliver(self, item: object) -> None:
        for branch in self.branches:
            if not branch.closed:
                await branch.queue.put(item)

    async def _pump(self) -> None:
        try:
            async for line in self._source:
                await self._deliver(line)
        except Exception as exc:
            await self._deliver(exc)
        else:
            await self._deliver(_END)

    async def release(self) -> None:
        if all(branch.closed for branch in self.branches) and self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)


class _Branch:
    """One of the two output streams of a tee."""

    def __init__(self, hub: _Hub) -> None:
        self._hub = hub
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self.closed = False
        self._finished = False

    def __aiter__(self) -> _Branch:
        return self

    async def __anext__(self) -> LogLine:
        if self._finished or self.closed:
            raise StopAsyncIteration
        self._hub.start()
        item = await self.queue.get()
        if item is _END:
            self._finished = True
            raise StopAsyncIteration
        if isinstance(item, Exception):
            self._finished = True
            raise item
        return item

    async def aclose(self) -> None:
        """Stop reading; once both outputs are closed the source is abandoned."""
        if self.closed:
            return
        self.closed = True
        while not self.queue.empty():
            self.queue.get_nowait()
        await self._hub.release()


def tee(source: AsyncIterable[LogLine]) -> tuple[_Branch, _Branch]:
    """Return two streams that each carry every line of ``source``."""
    hub = _Hub(source)
    first, second = _Branch(hub), _Branch(hub)
    hub.branches.extend((first, second))
    return first, second