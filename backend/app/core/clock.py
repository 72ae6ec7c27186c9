"""Salon clock.

All admission reasoning happens on one fixed civil offset (UTC+1 by default,
no daylight saving), never on the server's or the customer's local time.
Dates are ISO ``YYYY-MM-DD`` strings and times are ``HH:MM`` slot labels.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date as date_cls, datetime, timedelta, timezone

from backend.app.core.errors import InvalidInput

# 09:00 .. 19:30 in 30 minute steps
TIME_SLOTS: tuple[str, ...] = tuple(
    f"{minutes // 60:02d}:{minutes % 60:02d}" for minutes in range(9 * 60, 20 * 60, 30)
)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str) -> str:
    """Return ``value`` if it is a real calendar date in ``YYYY-MM-DD`` form."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise InvalidInput(f"date must be YYYY-MM-DD, got {value!r}", field="date")
    try:
        date_cls.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInput(f"date {value!r} does not exist", field="date") from exc
    return value


def parse_time(value: str) -> str:
    """Return ``value`` if it is one of the enumerated slot labels."""
    if value not in TIME_SLOTS:
        raise InvalidInput(f"time must be one of the slot labels, got {value!r}", field="time")
    return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Clock:
    """Fixed-offset clock; pass ``now`` to pin the current instant in tests."""

    def __init__(self, offset_minutes: int = 60, now: Callable[[], datetime] | None = None) -> None:
        self.tz = timezone(timedelta(minutes=offset_minutes))
        self._now = now or _utcnow

    def now(self) -> datetime:
        current = self._now()
        if current.tzinfo is None:
            raise ValueError("clock source must return an aware datetime")
        return current.astimezone(self.tz)

    def today(self) -> str:
        return self.now().date().isoformat()

    def is_past(self, date: str) -> bool:
        """True only for dates strictly before today; today itself is never past."""
        return date_cls.fromisoformat(date) < self.now().date()

    def is_today(self, date: str) -> bool:
        return date_cls.fromisoformat(date) == self.now().date()

    def is_slot_passed(self, date: str, time: str) -> bool:
        """True when ``date`` is today and the slot starts before the current minute."""
        if not self.is_today(date):
            return False
        now = self.now()
        hours, minutes = (int(part) for part in time.split(":"))
        return (hours, minutes) < (now.hour, now.minute)

    def is_sunday(self, date: str) -> bool:
        # Noon on the salon clock keeps the weekday clear of any boundary.
        noon = datetime.fromisoformat(f"{date}T12:00:00").replace(tzinfo=self.tz)
        return noon.weekday() == 6
