"""Prepending formatted timestamps to log lines.

Supported formats:

- ``rfc3339``: a full RFC 3339 timestamp, such as ``2024-01-15T10:04:05Z``
- ``unix``: whole seconds since the Unix epoch
- ``kitchen``: a 12-hour clock, such as ``10:04AM``
- ``relative``: time elapsed since the stamper was made, such as ``+1.234s``
"""

from __future__ import annotations

import dataclasses
import enum
import math
from collections.abc import AsyncIterable, AsyncIterator
from datetime import datetime, timedelta

from logdrift.runner import LogLine


class TimestampFormat(str, enum.Enum):
    """How timestamps are rendered."""

    RFC3339 = "rfc3339"
    UNIX = "unix"
    KITCHEN = "kitchen"
    RELATIVE = "relative"


def _aware(at: datetime) -> datetime:
    return at if at.tzinfo else at.astimezone()


def _rfc3339(at: datetime) -> str:
    at = _aware(at)
    offset = at.utcoffset() or timedelta(0)
    base = at.strftime("%Y-%m-%dT%H:%M:%S")
    if offset == timedelta(0):
        return base + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{base}{sign}{hours:02d}:{mins:02d}"


def _kitchen(at: datetime) -> str:
    at = _aware(at)
    hour = at.hour % 12 or 12
    suffix = "AM" if at.hour < 12 else "PM"
    return f"{hour}:{at.minute:02d}{suffix}"


def _duration(delta: timedelta) -> str:
    """Render ``delta``, truncated to milliseconds, as a compact duration."""
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    sign = "-" if micros < 0 else ""
    millis = abs(micros) // 1000
    if millis == 0:
        return "0s"
    if millis < 1000:
        return f"{sign}{millis}ms"
    seconds, fraction = divmod(millis, 1000)
    text = str(seconds % 60)
    if fraction:
        text += "." + f"{fraction:03d}".rstrip("0")
    text += "s"
    minutes = seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text


class Stamper:
    """Prepends a timestamp taken from each line's time to its text."""

    def __init__(self, fmt: TimestampFormat | str) -> None:
        try:
            self.format = TimestampFormat(fmt)
        except ValueError:
            raise ValueError(f"timestamp: unknown format {fmt!r}") from None
        self.started = datetime.now().astimezone()

    def _render(self, at: datetime) -> str:
        if self.format is TimestampFormat.UNIX:
            return str(math.floor(_aware(at).timestamp()))
        if self.format is TimestampFormat.KITCHEN:
            return _kitchen(at)
        if self.format is TimestampFormat.RELATIVE:
            return "+" + _duration(_aware(at) - self.started)
        return _rfc3339(at)

    def stamp(self, line: LogLine) -> LogLine:
        """Return ``line`` with its timestamp prepended to the text."""
        return dataclasses.replace(line, text=f"{self._render(line.at)} {line.text}")

    async def apply(self, source: AsyncIterable[LogLine]) -> AsyncIterator[LogLine]:
        """Yield every line of ``source`` stamped."""
        async for line in source:
            yield self.stamp(line)