"""Removing ANSI escape codes and surrounding whitespace from log lines."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import AsyncIterable, AsyncIterator

from logdrift.runner import LogLine

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")


class Stripper:
    """Removes ANSI escape codes and/or leading and trailing whitespace."""

    def __init__(self, *, ansi: bool = False, whitespace: bool = False) -> None:
        if not (ansi or whitespace):
            raise ValueError("strip: at least one option must be enabled")
        self.ansi = ansi
        self.whitespace = whitespace

    def apply(self, text: str) -> str:
        """Return a cleaned copy of ``text``."""
        if self.ansi:
            text = _ANSI_ESCAPE.sub("", text)
        if self.whitespace:
            text = text.strip()
        return text

    async def stream(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield every line of ``source`` with its text cleaned."""
        async for line in source:
            yield dataclasses.replace(line, text=self.apply(line.text))