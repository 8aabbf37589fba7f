from datetime import datetime, timedelta

import pytest

from logdrift.window import Window


def test_zero_size_raises():
    with pytest.raises(ValueError, match="positive"):
        Window(timedelta(0))


def test_negative_size_raises():
    with pytest.raises(ValueError, match="positive"):
        Window(timedelta(seconds=-1))


def test_valid_size():
    assert Window(timedelta(seconds=1)).size == timedelta(seconds=1)


def test_numeric_size_in_seconds():
    assert Window(90).size == timedelta(seconds=90)


def test_empty_window_counts_zero():
    assert Window(timedelta(minutes=1)).count("svc", datetime.now()) == 0


def test_count_reflects_entries():
    window = Window(timedelta(minutes=1))
    now = datetime.now()
    window.add("svc", now)
    window.add("svc", now)
    assert window.count("svc", now) == 2


def test_count_evicts_old_entries():
    window = Window(timedelta(minutes=1))
    old = datetime.now() - timedelta(minutes=2)
    window.add("svc", old)
    window.add("svc", old)
    now = datetime.now()
    window.add("svc", now)
    assert window.count("svc", now) == 1


def test_entry_on_boundary_is_kept():
    window = Window(timedelta(minutes=1))
    now = datetime(2024, 1, 1, 12, 0, 0)
    window.add("svc", now - timedelta(minutes=1))
    assert window.count("svc", now) == 1
    assert window.count("svc", now + timedelta(microseconds=1)) == 0


def test_services_returns_tracked_names():
    window = Window(timedelta(minutes=1))
    now = datetime.now()
    window.add("alpha", now)
    window.add("beta", now)
    assert sorted(window.services()) == ["alpha", "beta"]


def test_count_independent_per_service():
    window = Window(timedelta(minutes=1))
    now = datetime.now()
    window.add("a", now)
    window.add("a", now)
    window.add("b", now)
    assert window.count("a", now) == 2
    assert window.count("b", now) == 1