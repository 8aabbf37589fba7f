"""Back-pressure limiting for log line streams.

With the DROP policy, lines that do not fit in the buffer are discarded so
the producer never waits. With the BLOCK policy, the producer waits until the
consumer catches up, so nothing is lost.
"""

import asyncio
import contextlib
import enum
from collections.abc import AsyncIterable, AsyncIterator

from logdrift.fanin import _drain, _pumping
from logdrift.runner import LogLine

DEFAULT_CAPACITY = 256


class Policy(enum.IntEnum):
    """What happens when the buffer is full."""

    DROP = 0
    BLOCK = 1


class Limiter:
    """Buffers a stream and drops or waits when the buffer is full."""

    def __init__(self, capacity: int = 0, policy: Policy = Policy.DROP) -> None:
        try:
            policy = Policy(policy)
        except ValueError:
            raise ValueError("overflow: unknown policy") from None
        if capacity < 0:
            raise ValueError(f"overflow: capacity must be >= 0, got {capacity}")
        self.capacity = capacity or DEFAULT_CAPACITY
        self.policy = policy

    async def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield lines of ``source`` through a buffer governed by the policy."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.capacity)

        async def offer(line: LogLine) -> None:
            with contextlib.suppress(asyncio.QueueFull):
                queue.put_nowait(line)

        put = queue.put if self.policy is Policy.BLOCK else offer
        async with _pumping(queue, source, put=put), contextlib.aclosing(
            _drain(queue)
        ) as buffered:
            async for line in buffered:
                yield line