"""A pausable stage for log line streams.

While paused, lines are held back rather than dropped and are delivered in
order once the controller is resumed.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator

from logdrift.runner import LogLine


class Controller:
    """Pauses and resumes the stages it is given to."""

    def __init__(self) -> None:
        self._resumed = asyncio.Event()
        self._resumed.set()

    def pause(self) -> None:
        """Halt forwarding until :meth:`resume` is called."""
        self._resumed.clear()

    def resume(self) -> None:
        """Restore forwarding."""
        self._resumed.set()

    def is_paused(self) -> bool:
        """Report whether forwarding is currently halted."""
        return not self._resumed.is_set()

    async def _wait_resumed(self) -> None:
        await self._resumed.wait()


async def apply(
    controller: Controller, source: AsyncIterable[LogLine]
) -> AsyncIterator[LogLine]:
    """Yield lines of ``source``, waiting while ``controller`` is paused."""
    async for line in source:
        await controller._wait_resumed()
        yield line