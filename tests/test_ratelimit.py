import asyncio
import contextlib
import time

import pytest

from logdrift.ratelimit import Limiter
from logdrift.runner import LogLine


async def texts_then(texts, hold=False):
    for text in texts:
        yield LogLine("svc", text)
    if hold:
        await asyncio.Event().wait()


def test_new_negative_rate_raises():
    with pytest.raises(ValueError):
        Limiter(-1)


def test_new_zero_rate_is_unlimited():
    assert Limiter(0).lines_per_sec == 0


@pytest.mark.asyncio
async def test_apply_unlimited_passes_all_lines():
    stream = Limiter(0).apply(texts_then(["line1", "line2", "line3"]))
    assert [line.text async for line in stream] == ["line1", "line2", "line3"]


@pytest.mark.asyncio
async def test_apply_cancel_stops_output():
    stream = Limiter(1).apply(texts_then(["x"] * 50, hold=True))
    received = []
    with contextlib.suppress(TimeoutError):
        async with asyncio.timeout(0.05):
            async for line in stream:
                received.append(line)
    assert len(received) < 10


@pytest.mark.asyncio
async def test_apply_rate_limited_throttles_output():
    start = time.monotonic()
    got = [line async for line in Limiter(10).apply(texts_then(["1", "2", "3"]))]
    elapsed = time.monotonic() - start
    assert len(got) == 3
    assert elapsed >= 0.15