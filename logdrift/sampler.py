"""Keeping every ``n``-th line of a log line stream.

Unlike the per-service sampler, the count here is shared by all lines of the
stream.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass

from logdrift.runner import LogLine


@dataclass(frozen=True)
class Config:
    """Sampling settings: every ``n``-th line is kept; 1 keeps all."""

    n: int = 1

    def validate(self) -> None:
        """Raise ValueError if the settings are unusable."""
        if self.n < 1:
            raise ValueError(f"sampler: n must be >= 1, got {self.n}")


async def apply(config: Config, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
    """Yield every ``config.n``-th line of ``source``.

    The caller is responsible for passing a valid config.
    """
    count = 0
    async for line in source:
        count += 1
        if count % config.n == 0:
            yield line