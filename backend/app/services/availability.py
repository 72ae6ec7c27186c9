from __future__ import annotations

from backend.app.core.clock import TIME_SLOTS, Clock, parse_date, parse_time
from backend.app.models import DayAvailability, SlotAvailability
from backend.app.services.locks import LockRegistry
from backend.app.store.base import BookingStore, bounded


class AvailabilityResolver:
    """Read-only availability view for the booking UI and admin dashboard.

    Nothing here is authoritative; the admission gate re-reads lock state at
    commit time. A slot's ``available`` flag reflects only its lock, the
    booking count is informational.
    """

    def __init__(self, store: BookingStore, locks: LockRegistry, clock: Clock, *, timeout: float) -> None:
        self.store = store
        self.locks = locks
        self.clock = clock
        self.timeout = timeout

    async def resolve_slot(self, date: str, time: str) -> SlotAvailability:
        date, time = parse_date(date), parse_time(time)
        counts = await bounded(
            self.store.count_active_bookings(date, time), timeout=self.timeout, operation="count_active_bookings"
        )
        is_locked = await self.locks.is_slot_locked(date, time)
        return SlotAvailability(booking_count=counts.get(time, 0), is_locked=is_locked, available=not is_locked)

    async def resolve_day(self, date: str) -> DayAvailability:
        date = parse_date(date)
        counts = await bounded(
            self.store.count_active_bookings(date), timeout=self.timeout, operation="count_active_bookings"
        )
        counts = {time: count for time, count in counts.items() if count > 0}
        return DayAvailability(time_slot_counts=counts, total_bookings=sum(counts.values()))

    async def resolve(self, date: str, time: str | None = None) -> SlotAvailability | DayAvailability:
        if time:
            return await self.resolve_slot(date, time)
        return await self.resolve_day(date)

    async def slot_grid(self, date: str) -> dict:
        """Per-label flags for the booking calendar: passed, locked, and the day-level rules."""
        date = parse_date(date)
        date_locked = await self.locks.is_date_locked(date)
        locked_slots = {slot.time for slot in await self.locks.list_locked_slots(date)}
        return {
            "date": date,
            "past": self.clock.is_past(date),
            "sunday": self.clock.is_sunday(date),
            "date_locked": date_locked,
            "slots": [
                {
                    "time": time,
                    "passed": self.clock.is_slot_passed(date, time),
                    "locked": time in locked_slots,
                }
                for time in TIME_SLOTS
            ],
        }
