"""Detecting log file rotation.

A watcher polls a set of files and reports a rotation whenever a file's
inode changes or its size shrinks.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass

DEFAULT_POLL_INTERVAL = 0.5

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RotationEvent:
    """A rotation detected for a named source."""

    source: str
    path: str


class Watcher:
    """Polls named file paths and reports rotations."""

    def __init__(
        self, sources: Mapping[str, str], interval: float = DEFAULT_POLL_INTERVAL
    ) -> None:
        self.sources = dict(sources)
        self.poll_interval = interval if interval > 0 else DEFAULT_POLL_INTERVAL
        self._state: dict[str, tuple[int, int]] = {}

    async def watch(self) -> AsyncIterator[RotationEvent]:
        """Yield a RotationEvent each time a watched file is rotated."""
        while True:
            await asyncio.sleep(self.poll_interval)
            for name, path in self.sources.items():
                event = self._check(name, path)
                if event is not None:
                    _log.debug("rotation detected source=%s path=%s", name, path)
                    yield event

    def _check(self, name: str, path: str) -> RotationEvent | None:
        try:
            info = os.stat(path)
        except OSError:
            return None
        inode, size = info.st_ino, info.st_size
        previous = self._state.get(name)
        self._state[name] = (inode, size)
        if previous is None:
            return None
        prev_inode, prev_size = previous
        if inode != prev_inode or size < prev_size:
            return RotationEvent(name, path)
        return None