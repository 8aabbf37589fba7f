"""Merging several log line streams into one."""

import asyncio
import contextlib
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable

from logdrift.runner import LogLine

_END = object()


async def _pump(
    source: AsyncIterable[LogLine],
    queue: asyncio.Queue,
    put: Callable[[LogLine], Awaitable[None]] | None = None,
) -> None:
    """Copy ``source`` into ``queue``, then an end marker or the error raised."""
    deliver = put or queue.put
    try:
        async for line in source:
            await deliver(line)
    except Exception as exc:
        await queue.put(exc)
    else:
        await queue.put(_END)


@contextlib.asynccontextmanager
async def _pumping(queue: asyncio.Queue, *sources: AsyncIterable[LogLine], put=None):
    """Run one pump per source for the duration of the block."""
    tasks = [asyncio.create_task(_pump(source, queue, put)) for source in sources]
    try:
        yield
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


async def _drain(queue: asyncio.Queue, sources: int = 1) -> AsyncIterator[LogLine]:
    """Yield queued lines until every source has ended; re-raise their errors."""
    while sources:
        item = await queue.get()
        if item is _END:
            sources -= 1
        elif isinstance(item, Exception):
            raise item
        else:
            yield item


async def fan_in(*args: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
    """Merge the given streams; end once every one of them is drained.

    An exception raised by any stream is raised to the consumer.
    """
    queue: asyncio.Queue = asyncio.Queue(maxsize=128)
    async with _pumping(queue, *args), contextlib.aclosing(
        _drain(queue, len(args))
    ) as merged:
        async for line in merged:
            yield line