import asyncio

import pytest

from logdrift.tail import FileSource, Tailer, WatchConfig, tail_all, watch


def _append(path, text):
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(text)


def test_tailer_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Tailer(tmp_path / "missing.log")


@pytest.mark.asyncio
async def test_tail_emits_only_new_lines(tmp_path):
    path = tmp_path / "test.log"
    path.write_text("existing\n")
    lines = Tailer(path).tail("svc")
    try:
        _append(path, "hello world\nsecond line\n")
        first = await asyncio.wait_for(anext(lines), 2)
        second = await asyncio.wait_for(anext(lines), 2)
    finally:
        await lines.aclose()
    assert first.text == "hello world\n"
    assert first.service == "svc"
    assert second.text == "second line\n"


@pytest.mark.asyncio
async def test_tail_emits_partial_line(tmp_path):
    path = tmp_path / "test.log"
    path.write_text("")
    lines = Tailer(path).tail("svc")
    try:
        _append(path, "partial")
        line = await asyncio.wait_for(anext(lines), 2)
    finally:
        await lines.aclose()
    assert line.text == "partial"


def test_tail_all_no_sources_raises():
    with pytest.raises(ValueError):
        tail_all([])


def test_tail_all_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="svc"):
        tail_all([FileSource("svc", str(tmp_path / "no_such_file.log"))])


@pytest.mark.asyncio
async def test_tail_all_merges_multiple_sources(tmp_path):
    path_a = tmp_path / "a.log"
    path_b = tmp_path / "b.log"
    path_a.write_text("")
    path_b.write_text("")
    merged = tail_all([FileSource("alpha", str(path_a)), FileSource("beta", str(path_b))])
    try:
        _append(path_a, "from alpha\n")
        _append(path_b, "from beta\n")
        received = [await asyncio.wait_for(anext(merged), 2) for _ in range(2)]
    finally:
        await merged.aclose()
    assert {line.service for line in received} == {"alpha", "beta"}
    assert sorted(line.text for line in received) == ["from alpha\n", "from beta\n"]


def test_watch_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        watch(WatchConfig(str(tmp_path / "nonexistent.log")))


@pytest.mark.asyncio
async def test_watch_emits_initial_result(tmp_path):
    path = tmp_path / "watch.log"
    path.write_text("")
    results = watch(WatchConfig(str(path), 0.05))
    try:
        result = await asyncio.wait_for(anext(results), 2)
        _append(path, "hello\n")
        text = await asyncio.wait_for(anext(result.lines), 2)
        await result.lines.aclose()
    finally:
        await results.aclose()
    assert result.path == str(path)
    assert text == "hello\n"


@pytest.mark.asyncio
async def test_watch_restarts_after_rotation(tmp_path):
    path = tmp_path / "watch.log"
    path.write_text("aaaaaaaaaa\n")
    results = watch(WatchConfig(str(path), 0.05))
    try:
        first = await asyncio.wait_for(anext(results), 2)
        pending = asyncio.ensure_future(anext(results))
        await asyncio.sleep(0.12)
        path.write_text("x\n")
        second = await asyncio.wait_for(pending, 2)
        old_lines = await asyncio.wait_for(
            asyncio.ensure_future(_drain(first.lines)), 2
        )
        _append(path, "after\n")
        new_text = await asyncio.wait_for(anext(second.lines), 2)
        await second.lines.aclose()
    finally:
        await results.aclose()
    assert second.path == str(path)
    assert old_lines == []
    assert new_text == "after\n"


async def _drain(lines):
    return [text async for text in lines]