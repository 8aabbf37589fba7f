"""Coalescing multi-line records into single log lines.

A record begins when a line matches the start pattern; lines that do not
match are continuations and are joined to the current record with newlines.
A timeout flushes a pending record when no new start line arrives, so the
last record of a quiet stream is not held back.
"""

import asyncio
import re
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import replace

from logdrift.fanin import _END, _pumping
from logdrift.runner import LogLine

DEFAULT_TIMEOUT = 2.0


class Joiner:
    """Joins continuation lines onto the record that a start line opened."""

    def __init__(self, start_pattern: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.start = re.compile(start_pattern)
        self.timeout = timeout if timeout > 0 else DEFAULT_TIMEOUT

    async def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield coalesced records read from ``source``."""
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        buffer: list[str] = []
        current = LogLine("", "")
        deadline: float | None = loop.time() + self.timeout

        def joined() -> LogLine:
            record = replace(current, text="\n".join(buffer))
            buffer.clear()
            return record

        async with _pumping(queue, source):
            while True:
                wait = None if deadline is None else max(0.0, deadline - loop.time())
                try:
                    item = await asyncio.wait_for(queue.get(), wait)
                except TimeoutError:
                    deadline = None
                    if buffer:
                        yield joined()
                    continue
                if item is _END:
                    if buffer:
                        yield joined()
                    return
                if isinstance(item, Exception):
                    raise item
                if self.start.search(item.text):
                    if buffer:
                        yield joined()
                    current = item
                    deadline = loop.time() + self.timeout
                buffer.append(item.text)