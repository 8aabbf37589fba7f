"""Text normalization for log lines.

Any combination of lower-casing, collapsing whitespace runs and trimming can
be applied. The service of a line is never changed.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import AsyncIterable, AsyncIterator

from logdrift.runner import LogLine

_MULTI_SPACE = re.compile(r"[\t\n\f\r ]+")


class Normalizer:
    """Applies the enabled normalizations to log lines."""

    def __init__(
        self,
        *,
        lowercase: bool = False,
        collapse_spaces: bool = False,
        trim: bool = False,
    ) -> None:
        if not (lowercase or collapse_spaces or trim):
            raise ValueError("normalize: at least one option must be enabled")
        self.lowercase = lowercase
        self.collapse_spaces = collapse_spaces
        self.trim = trim

    def apply(self, line: LogLine) -> LogLine:
        """Return a normalized copy of ``line``."""
        text = line.text
        if self.trim:
            text = text.strip()
        if self.collapse_spaces:
            text = _MULTI_SPACE.sub(" ", text)
        if self.lowercase:
            text = text.lower()
        return dataclasses.replace(line, text=text)

    async def apply_all(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield every line of ``source`` normalized."""
        async for line in source:
            yield self.apply(line)