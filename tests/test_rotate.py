import asyncio
import contextlib

import pytest

from logdrift.rotate import DEFAULT_POLL_INTERVAL, RotationEvent, Watcher


def _write_log(tmp_path, content):
    path = tmp_path / "rotate.log"
    path.write_text(content)
    return str(path)


@pytest.mark.asyncio
async def test_watcher_no_rotation_no_events(tmp_path):
    path = _write_log(tmp_path, "hello\n")
    w = Watcher({"svc": path}, 0.05)
    stream = w.watch()
    events = []
    with contextlib.suppress(TimeoutError):
        async with asyncio.timeout(0.2):
            async for event in stream:
                events.append(event)
    await stream.aclose()
    assert events == []


@pytest.mark.asyncio
async def test_watcher_file_shrinks_emits_event(tmp_path):
    path = _write_log(tmp_path, "aaabbbccc\n")
    w = Watcher({"svc": path}, 0.04)
    stream = w.watch()
    pending = asyncio.ensure_future(anext(stream))
    await asyncio.sleep(0.06)
    with open(path, "w") as handle:
        handle.write("x\n")
    async with asyncio.timeout(0.4):
        event = await pending
    await stream.aclose()
    assert event == RotationEvent("svc", path)


@pytest.mark.asyncio
async def test_watcher_missing_file_no_events(tmp_path):
    w = Watcher({"svc": str(tmp_path / "missing.log")}, 0.03)
    stream = w.watch()
    with pytest.raises(TimeoutError):
        async with asyncio.timeout(0.15):
            await anext(stream)
    assert [event async for event in stream] == []


@pytest.mark.asyncio
async def test_watcher_cancel_closes_stream(tmp_path):
    path = _write_log(tmp_path, "data\n")
    w = Watcher({"svc": path}, 0.03)
    stream = w.watch()
    pending = asyncio.ensure_future(anext(stream))
    await asyncio.sleep(0.01)
    pending.cancel()
    with pytest.raises(asyncio.CancelledError):
        await pending
    assert pending.cancelled() is True
    assert [event async for event in stream] == []


def test_new_default_interval():
    assert Watcher({}, 0).poll_interval == DEFAULT_POLL_INTERVAL
    assert Watcher({}, -1).poll_interval == DEFAULT_POLL_INTERVAL