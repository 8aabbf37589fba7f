import asyncio

import pytest

from logdrift.runner import LogLine, Runner


async def run_script(script):
    stream = await Runner().start("svc", "sh", ["-c", script])
    async with asyncio.timeout(5):
        return [line async for line in stream]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("script", "expected"),
    [
        ("echo hello", ["hello"]),
        ("echo one; echo two", ["one", "two"]),
        ("echo oops 1>&2", ["oops"]),
    ],
)
async def test_start_streams_output_until_exit(script, expected):
    lines = await run_script(script)
    assert [line.text for line in lines] == expected
    assert {line.service for line in lines} == {"svc"}


@pytest.mark.asyncio
async def test_start_missing_command_raises():
    with pytest.raises(FileNotFoundError):
        await Runner().start("svc", "/no/such/command-here", [])


@pytest.mark.asyncio
async def test_stop_all_ends_stream():
    runner = Runner()
    stream = await runner.start("svc", "sh", ["-c", "exec sleep 60"])
    runner.stop_all()
    async with asyncio.timeout(5):
        remaining = [line async for line in stream]
    assert remaining == []


def test_log_line_defaults():
    line = LogLine("svc", "text")
    assert line.error is None
    assert line.at.tzinfo is not None