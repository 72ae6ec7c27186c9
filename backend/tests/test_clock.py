from datetime import datetime, timedelta, timezone

import pytest

from backend.app.core.clock import TIME_SLOTS, Clock, parse_date, parse_time
from backend.app.core.errors import InvalidInput


def at(hour: int, minute: int, day: int = 3) -> Clock:
    """Salon clock pinned to 2025-06-<day> hour:minute (UTC+1)."""
    return Clock(60, now=lambda: datetime(2025, 6, day, hour - 1, minute, tzinfo=timezone.utc))


def test_slot_grid():
    assert len(TIME_SLOTS) == 22
    assert TIME_SLOTS[0] == "09:00"
    assert TIME_SLOTS[-1] == "19:30"
    assert "14:30" in TIME_SLOTS


def test_today_uses_fixed_offset_not_utc():
    late_utc = Clock(60, now=lambda: datetime(2025, 6, 2, 23, 30, tzinfo=timezone.utc))
    assert late_utc.today() == "2025-06-03"
    assert late_utc.now().hour == 0


def test_today_ignores_source_timezone():
    tokyo = timezone(timedelta(hours=9))
    clock = Clock(60, now=lambda: datetime(2025, 6, 3, 8, 0, tzinfo=tokyo))
    # 08:00+09:00 is 00:00 UTC, 01:00 on the salon clock
    assert clock.today() == "2025-06-03"
    assert clock.now().hour == 1


def test_is_past_is_strict():
    clock = at(10, 15)
    assert clock.is_past("2025-06-02")
    assert not clock.is_past("2025-06-03")
    assert not clock.is_past("2025-06-04")


def test_slot_passed_today():
    clock = at(10, 15)
    assert clock.is_slot_passed("2025-06-03", "09:00")
    assert clock.is_slot_passed("2025-06-03", "10:00")
    assert not clock.is_slot_passed("2025-06-03", "10:30")
    assert not clock.is_slot_passed("2025-06-03", "19:30")


def test_slot_at_current_minute_is_not_passed():
    clock = at(10, 0)
    assert not clock.is_slot_passed("2025-06-03", "10:00")
    assert clock.is_slot_passed("2025-06-03", "09:30")


def test_slot_never_passed_on_other_days():
    clock = at(19, 45)
    for time in TIME_SLOTS:
        assert not clock.is_slot_passed("2025-06-04", time)
        assert not clock.is_slot_passed("2025-06-02", time)


@pytest.mark.parametrize(
    "date, expected",
    [
        ("2025-06-05", False),
        ("2025-06-06", False),
        ("2025-06-07", False),
        ("2025-06-08", True),
        ("2025-06-09", False),
        ("2025-06-10", False),
        ("2025-06-11", False),
    ],
)
def test_is_sunday_around_reference_week(date, expected):
    assert at(10, 15).is_sunday(date) is expected


def test_is_sunday_independent_of_current_time():
    assert Clock(60, now=lambda: datetime(2025, 6, 7, 23, 59, tzinfo=timezone.utc)).is_sunday("2025-12-28")


@pytest.mark.parametrize("value", ["2025-6-10", "20250610", "2025-02-30", "", "10.06.2025"])
def test_parse_date_rejects_malformed(value):
    with pytest.raises(InvalidInput):
        parse_date(value)


@pytest.mark.parametrize("value", ["08:30", "20:00", "14:15", "9:00", ""])
def test_parse_time_rejects_labels_off_the_grid(value):
    with pytest.raises(InvalidInput):
        parse_time(value)


def test_naive_clock_source_is_rejected():
    clock = Clock(60, now=lambda: datetime(2025, 6, 3, 9, 0))
    with pytest.raises(ValueError):
        clock.now()
