"""Capturing, saving and loading point-in-time views of log streams.

A Collector drains a stream into a Snapshot, which can be saved as JSON and
loaded again later as a baseline to compare against.
"""

from __future__ import annotations

import json
import os
from collections.abc import AsyncIterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from logdrift.runner import LogLine


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class Entry:
    """One captured log line with the time it was captured."""

    service: str
    line: str
    captured_at: datetime = field(default_factory=_now)

    def _to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "line": self.line,
            "captured_at": self.captured_at.isoformat(),
        }

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Entry:
        return cls(
            service=data["service"],
            line=data["line"],
            captured_at=datetime.fromisoformat(data["captured_at"]),
        )


@dataclass
class Snapshot:
    """An ordered collection of captured entries."""

    created_at: datetime = field(default_factory=_now)
    entries: list[Entry] = field(default_factory=list)

    def add(self, service: str, line: str) -> None:
        """Append an entry captured now."""
        self.entries.append(Entry(service, line))

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the snapshot to ``path`` as indented JSON."""
        data = {
            "created_at": self.created_at.isoformat(),
            "entries": [entry._to_dict() for entry in self.entries],
        }
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
            handle.write("\n")


def load(path: str | os.PathLike[str]) -> Snapshot:
    """Read a snapshot saved at ``path``.

    Raises OSError if the file cannot be read and ValueError if its content
    is not a snapshot.
    """
    with open(path, encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"snapshot: decode {os.fspath(path)!r}: {exc}") from exc
    try:
        return Snapshot(
            created_at=datetime.fromisoformat(data["created_at"]),
            entries=[Entry._from_dict(item) for item in data.get("entries") or []],
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise ValueError(f"snapshot: decode {os.fspath(path)!r}: {exc}") from exc


class Collector:
    """Accumulates the lines of a stream into a snapshot."""

    def __init__(self) -> None:
        self._snapshot = Snapshot()

    async def collect(self, source: AsyncIterable[LogLine]) -> Snapshot:
        """Add every line of ``source`` to the snapshot and return it.

        If collection is cancelled, what was gathered so far stays available
        through :meth:`snapshot`.
        """
        async for line in source:
            self._snapshot.add(line.service, line.text)
        return self._snapshot

    def snapshot(self) -> Snapshot:
        """Return the snapshot gathered so far."""
        return self._snapshot