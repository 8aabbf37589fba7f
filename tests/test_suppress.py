import asyncio

import pytest

from logdrift.runner import LogLine
from logdrift.suppress import Suppressor, apply


def _line(service, text):
    return LogLine(service, text)


async def _source(*lines):
    for line in lines:
        yield line


async def _blocking():
    await asyncio.Event().wait()
    yield LogLine("svc", "never")


async def _collect(stream):
    return [line async for line in stream]


def test_invalid_max_reps_raises():
    with pytest.raises(ValueError):
        Suppressor(0)


def test_first_occurrence_passes():
    assert Suppressor(2).allow(_line("svc", "hello")) is True


def test_within_limit_passes():
    suppressor = Suppressor(3)
    line = _line("svc", "repeat")
    assert [suppressor.allow(line) for _ in range(3)] == [True, True, True]


def test_exceeds_limit_dropped():
    suppressor = Suppressor(2)
    line = _line("svc", "repeat")
    suppressor.allow(line)
    suppressor.allow(line)
    assert suppressor.allow(line) is False


def test_different_line_resets_counter():
    suppressor = Suppressor(1)
    assert suppressor.allow(_line("svc", "a")) is True
    assert suppressor.allow(_line("svc", "a")) is False
    assert suppressor.allow(_line("svc", "b")) is True
    assert suppressor.allow(_line("svc", "a")) is True


def test_independent_per_service():
    suppressor = Suppressor(1)
    first = _line("svc1", "msg")
    second = _line("svc2", "msg")
    suppressor.allow(first)
    suppressor.allow(second)
    assert suppressor.allow(first) is False
    assert suppressor.allow(second) is False


@pytest.mark.asyncio
async def test_apply_filters_excess_repetitions():
    suppressor = Suppressor(2)
    lines = await _collect(
        apply(
            suppressor,
            _source(
                _line("svc", "x"),
                _line("svc", "x"),
                _line("svc", "x"),
                _line("svc", "y"),
            ),
        )
    )
    assert [line.text for line in lines] == ["x", "x", "y"]


@pytest.mark.asyncio
async def test_apply_waits_on_silent_source():
    with pytest.raises(TimeoutError):
        await asyncio.wait_for(_collect(apply(Suppressor(1), _blocking())), 0.1)