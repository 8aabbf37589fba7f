"""Following files as they grow, like ``tail -f``.

A tailer starts at the end of its file and yields each line appended after
that, terminator included. Several files can be followed at once, and a
watched file is re-opened whenever it is rotated.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import BinaryIO

from logdrift.fanin import fan_in
from logdrift.rotate import Watcher
from logdrift.runner import LogLine

POLL_INTERVAL = 0.2
DEFAULT_WATCH_INTERVAL = 1.0


def _open_at_end(path: str) -> BinaryIO:
    handle = open(path, "rb")
    try:
        handle.seek(0, os.SEEK_END)
    except OSError:
        handle.close()
        raise
    return handle


async def _idle(stop: asyncio.Event | None) -> bool:
    """Wait one poll interval; report whether ``stop`` was set meanwhile."""
    if stop is None:
        await asyncio.sleep(POLL_INTERVAL)
        return False
    try:
        await asyncio.wait_for(stop.wait(), POLL_INTERVAL)
    except TimeoutError:
        return False
    return True


async def _follow(
    handle: BinaryIO, service: str, stop: asyncio.Event | None = None
) -> AsyncIterator[LogLine]:
    with handle:
        while stop is None or not stop.is_set():
            try:
                raw = handle.readline()
            except OSError:
                return
            if raw:
                yield LogLine(service, raw.decode("utf-8", errors="replace"))
            if not raw.endswith(b"\n") and await _idle(stop):
                return


async def _texts(lines: AsyncIterator[LogLine]) -> AsyncIterator[str]:
    try:
        async for line in lines:
            yield line.text
    finally:
        await lines.aclose()


class Tailer:
    """Follows one file. The file must exist when the tailer is made."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        os.stat(path)
        self.path = os.fspath(path)

    def tail(self, service: str) -> AsyncIterator[LogLine]:
        """Open the file at its end and return a stream of appended lines.

        Raises OSError if the file cannot be opened.
        """
        return _follow(_open_at_end(self.path), service)


@dataclass(frozen=True)
class FileSource:
    """A file to follow and the service its lines belong to."""

    service: str
    path: str


def tail_all(sources: Sequence[FileSource]) -> AsyncIterator[LogLine]:
    """Follow every source and merge their lines into one stream."""
    if not sources:
        raise ValueError("tail: no sources provided")
    opened: list[tuple[str, BinaryIO]] = []
    for source in sources:
        try:
            tailer = Tailer(source.path)
            opened.append((source.service, _open_at_end(tailer.path)))
        except OSError as exc:
            for _, handle in opened:
                handle.close()
            raise OSError(
                exc.errno, f"tail: {source.service}: {exc.strerror}", exc.filename
            ) from exc
    return fan_in(*(_follow(handle, service) for service, handle in opened))


@dataclass(frozen=True)
class WatchConfig:
    """The file to watch and how often to check it for rotation, in seconds."""

    path: str
    interval: float = 0.0


@dataclass(frozen=True)
class WatchResult:
    """A freshly started tailer: ``lines`` carries the texts of new lines."""

    path: str
    lines: AsyncIterator[str]


def watch(config: WatchConfig) -> AsyncIterator[WatchResult]:
    """Follow a file, starting a new tailer whenever it is rotated.

    A WatchResult is yielded for every tailer started, the first included;
    the previous tailer's lines end when a rotation is detected.
    """
    os.stat(config.path)
    interval = config.interval if config.interval > 0 else DEFAULT_WATCH_INTERVAL
    return _watch(os.fspath(config.path), interval)


async def _watch(path: str, interval: float) -> AsyncIterator[WatchResult]:
    while True:
        try:
            handle = _open_at_end(Tailer(path).path)
        except OSError:
            return
        stop = asyncio.Event()
        try:
            yield WatchResult(path, _texts(_follow(handle, path, stop)))
            events = Watcher({path: path}, interval).watch()
            try:
                await anext(events)
            finally:
                await events.aclose()
        finally:
            stop.set()