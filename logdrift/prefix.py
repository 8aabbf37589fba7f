"""Prepending a fixed string to every log line's text."""

from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import replace

from logdrift.runner import LogLine


class Prefixer:
    """Prepends a fixed string to the text of each log line."""

    def __init__(self, prefix: str) -> None:
        if not prefix:
            raise ValueError("prefix: prefix string must not be empty")
        self.prefix = prefix

    def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Return a stream of every line of ``source`` with the prefix prepended."""
        return (replace(line, text=self.prefix + line.text) async for line in source)