"""
Tests for the wall clock.
"""

from datetime import datetime

from canvass.clock import Clock, format_timestamp


def fixed_now():
    return datetime(2026, 10, 19, 9, 5, 7)


def test_format_timestamp():
    assert format_timestamp(datetime(2026, 10, 19, 9, 5, 7)) == "19/10/2026, 09:05:07"
    assert format_timestamp(datetime(2026, 1, 2, 23, 0, 0)) == "2/1/2026, 23:00:00"


def test_timestamp_uses_injected_now():
    assert Clock(now=fixed_now).timestamp() == "19/10/2026, 09:05:07"


def test_run_ticks_once_per_interval():
    times = iter([datetime(2026, 10, 19, 9, 0, s) for s in range(10)])
    clock = Clock(now=lambda: next(times))
    shown, slept = [], []
    clock.run(shown.append, ticks=3, sleep=slept.append)
    assert shown == ["19/10/2026, 09:00:01", "19/10/2026, 09:00:02", "19/10/2026, 09:00:03"]
    assert slept == [1.0, 1.0]
    assert clock.display == shown[-1]
