"""Starting service commands and streaming their output as log lines."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime

_DONE = object()


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class LogLine:
    """A single log line from a named service."""

    service: str
    text: str
    error: BaseException | None = field(default=None, compare=False)
    at: datetime = field(default_factory=_now)


def _decode(raw: bytes) -> str:
    """Drop the line terminator (and a trailing carriage return) and decode."""
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw.decode("utf-8", errors="replace")


class Runner:
    """Starts service commands and streams their stdout and stderr lines."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._processes: list[asyncio.subprocess.Process] = []

    async def start(
        self, service: str, shell: str, args: Sequence[str]
    ) -> AsyncIterator[LogLine]:
        """Launch ``shell`` with ``args`` and return a stream of its output lines.

        The stream ends when the command exits. Closing the stream early
        kills the command.
        """
        process = await asyncio.create_subprocess_exec(
            shell,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        with self._lock:
            self._processes.append(process)
        return self._stream(service, process)

    async def _stream(
        self, service: str, process: asyncio.subprocess.Process
    ) -> AsyncIterator[LogLine]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=64)

        async def pump(reader: asyncio.StreamReader) -> None:
            try:
                async for raw in reader:
                    await queue.put(LogLine(service, _decode(raw)))
            except ValueError as exc:
                await queue.put(LogLine(service, "", error=exc))

        async def produce() -> None:
            await asyncio.gather(pump(process.stdout), pump(process.stderr))
            await process.wait()
            await queue.put(_DONE)

        producer = asyncio.create_task(produce())
        try:
            while (item := await queue.get()) is not _DONE:
                yield item
        finally:
            if not producer.done():
                producer.cancel()
                if process.returncode is None:
                    try:
                        process.kill()
                    except ProcessLookupError:
                        pass
                await asyncio.gather(producer, return_exceptions=True)

    def stop_all(self) -> None:
        """Kill every command started by this runner that is still running."""
        with self._lock:
            for process in self._processes:
                if process.returncode is None:
                    try:
                        process.kill()
                    except ProcessLookupError:
                        pass