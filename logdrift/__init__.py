"""Composable asyncio stages for streaming, filtering and reshaping log lines."""

__version__ = "0.1.0"

__all__ = [
    "fanin",
    "multiline",
    "normalize",
    "offset",
    "overflow",
    "pause",
    "prefix",
    "ratelimit",
    "redact",
    "reorder",
    "retry",
    "rotate",
    "runner",
    "sample",
    "sampler",
    "sequence",
    "snapshot",
    "splitter",
    "strip",
    "suppress",
    "tail",
    "tee",
    "timestamp",
    "window",
]