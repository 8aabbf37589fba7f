"""Pattern-based redaction of sensitive data in log lines.

Replacement strings may refer to groups of the match as ``$1``, ``${1}``,
``$name`` or ``${name}``; ``$$`` stands for a literal dollar sign.
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterable, AsyncIterator, Mapping
from dataclasses import dataclass

_TEMPLATE_REF = re.compile(r"\$(?:(\$)|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")


def _group(match: re.Match[str], name: str) -> str:
    if name.isdigit():
        index = int(name)
        value = match.group(index) if index <= match.re.groups else None
    else:
        value = match.group(name) if name in match.re.groupindex else None
    return value or ""


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"redact: invalid pattern {pattern!r}: {exc}") from exc


@dataclass(frozen=True)
class _Rule:
    pattern: re.Pattern[str]
    replacement: str

    def _expand(self, match: re.Match[str]) -> str:
        return _TEMPLATE_REF.sub(
            lambda ref: "$" if ref.group(1) else _group(match, ref.group(2) or ref.group(3)),
            self.replacement,
        )

    def apply(self, text: str) -> str:
        return self.pattern.sub(self._expand, text)


class Redactor:
    """Applies a sequence of regex replacement rules to text."""

    def __init__(self, patterns: Mapping[str, str] | None = None) -> None:
        self._rules = [
            _Rule(_compile(pattern), replacement)
            for pattern, replacement in (patterns or {}).items()
        ]

    def apply(self, text: str) -> str:
        """Return ``text`` with every rule's matches replaced."""
        for rule in self._rules:
            text = rule.apply(text)
        return text

    async def apply_stream(self, source: AsyncIterable[str]) -> AsyncIterator[str]:
        """Yield every string of ``source`` redacted."""
        async for text in source:
            yield self.apply(text)

    def rule_count(self) -> int:
        """Return the number of rules."""
        return len(self._rules)

    def add_rule(self, pattern: str, replacement: str) -> None:
        """Compile and append one more rule."""
        self._rules.append(_Rule(_compile(pattern), replacement))