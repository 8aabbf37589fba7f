"""Routing log lines into named outputs by pattern.

Each rule maps a bucket name to a regular expression; a line goes to the
first bucket whose pattern it matches, otherwise to the default bucket.
Lines whose bucket has no output are dropped, so uninteresting traffic is
discarded by leaving its bucket out of the outputs.
"""

from __future__ import annotations

import asyncio
import re
from collections import deque
from collections.abc import AsyncIterable, Iterable, Mapping
from dataclasses import dataclass

from logdrift.runner import LogLine


class _Outlet:
    """A bounded, closable async stream of log lines."""

    def __init__(self, capacity: int = 0) -> None:
        self._capacity = max(0, capacity)
        self._items: deque[LogLine] = deque()
        self._closed = False
        self._changed = asyncio.Condition()

    async def send(self, line: LogLine) -> None:
        async with self._changed:
            if self._closed:
                raise RuntimeError("splitter: send on closed output")
            self._items.append(line)
            self._changed.notify_all()
            await self._changed.wait_for(
                lambda: len(self._items) <= self._capacity or self._closed
            )

    async def close(self) -> None:
        async with self._changed:
            self._closed = True
            self._changed.notify_all()

    def __aiter__(self) -> _Outlet:
        return self

    async def __anext__(self) -> LogLine:
        async with self._changed:
            await self._changed.wait_for(lambda: self._items or self._closed)
            if not self._items:
                raise StopAsyncIteration
            line = self._items.popleft()
            self._changed.notify_all()
            return line


@dataclass(frozen=True)
class _Rule:
    bucket: str
    pattern: re.Pattern[str]


class Splitter:
    """Routes lines to buckets by the first matching pattern."""

    def __init__(self, rules: Mapping[str, str] | None, default_bucket: str = "") -> None:
        if not rules:
            raise ValueError("splitter: at least one rule is required")
        self._rules: list[_Rule] = []
        for bucket, pattern in rules.items():
            if not bucket:
                raise ValueError("splitter: bucket name must not be empty")
            try:
                compiled = re.compile(pattern)
            except re.error as exc:
                raise ValueError(
                    f"splitter: invalid pattern for bucket {bucket!r}: {exc}"
                ) from exc
            self._rules.append(_Rule(bucket, compiled))
        self.default_bucket = default_bucket

    def route(self, text: str) -> str:
        """Return the bucket for ``text``; an empty string means drop it."""
        for rule in self._rules:
            if rule.pattern.search(text):
                return rule.bucket
        return self.default_bucket

    async def apply(
        self, source: AsyncIterable[LogLine], outputs: Mapping[str, _Outlet]
    ) -> None:
        """Send each line of ``source`` to the output of its bucket.

        Every output is closed when the source ends or this is cancelled.
        """
        try:
            async for line in source:
                outlet = outputs.get(self.route(line.text))
                if outlet is not None:
                    await outlet.send(line)
        finally:
            for outlet in outputs.values():
                await outlet.close()


def make_outputs(buckets: Iterable[str], buf_size: int = 0) -> dict[str, _Outlet]:
    """Create an output holding up to ``buf_size`` lines for every bucket."""
    return {bucket: _Outlet(buf_size) for bucket in buckets}


def bucket_names(outputs: Mapping[str, _Outlet]) -> list[str]:
    """Return the bucket names of ``outputs`` in sorted order."""
    return sorted(outputs)