from __future__ import annotations

import asyncio
from collections import Counter

from backend.app.core.errors import Conflict, DateLocked, SlotLocked
from backend.app.models import Booking, BookingStatus, LockedDate, LockedTimeSlot


class MemoryStore:
    """Process-local BookingStore; every operation runs under one asyncio.Lock."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._bookings: dict[str, Booking] = {}
        self._locked_dates: dict[str, LockedDate] = {}
        self._locked_slots: dict[tuple[str, str], LockedTimeSlot] = {}

    async def ping(self) -> None:
        return None

    async def commit_booking(self, booking: Booking) -> Booking:
        async with self._lock:
            if booking.date in self._locked_dates:
                raise DateLocked("Date is locked", date=booking.date)
            if booking.time and (booking.date, booking.time) in self._locked_slots:
                raise SlotLocked("Time slot is locked", date=booking.date, time=booking.time)
            if booking.id in self._bookings:
                raise Conflict(f"Booking {booking.id} already exists", booking_id=booking.id)
            self._bookings[booking.id] = booking
            return booking

    async def get_booking(self, booking_id: str) -> Booking | None:
        async with self._lock:
            return self._bookings.get(booking_id)

    async def list_bookings(self, date: str | None = None) -> list[Booking]:
        async with self._lock:
            return [b for b in self._bookings.values() if date is None or b.date == date]

    async def count_active_bookings(self, date: str, time: str | None = None) -> dict[str, int]:
        async with self._lock:
            return dict(
                Counter(
                    b.time
                    for b in self._bookings.values()
                    if b.date == date
                    and (time is None or b.time == time)
                    and b.status != BookingStatus.CANCELLED
                )
            )

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> Booking | None:
        async with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return None
            updated = booking.with_status(status)
            self._bookings[booking_id] = updated
            return updated

    async def delete_booking(self, booking_id: str) -> bool:
        async with self._lock:
            return self._bookings.pop(booking_id, None) is not None

    async def insert_locked_date(self, locked: LockedDate) -> LockedDate:
        async with self._lock:
            if locked.date in self._locked_dates:
                raise Conflict("Date is already locked", date=locked.date)
            self._locked_dates[locked.date] = locked
            return locked

    async def delete_locked_date(self, date: str) -> bool:
        async with self._lock:
            return self._locked_dates.pop(date, None) is not None

    async def get_locked_date(self, date: str) -> LockedDate | None:
        async with self._lock:
            return self._locked_dates.get(date)

    async def list_locked_dates(self) -> list[LockedDate]:
        async with self._lock:
            return list(self._locked_dates.values())

    async def insert_locked_slot(self, locked: LockedTimeSlot) -> LockedTimeSlot:
        key = (locked.date, locked.time)
        async with self._lock:
            if key in self._locked_slots:
                raise Conflict("Time slot is already locked", date=locked.date, time=locked.time)
            self._locked_slots[key] = locked
            return locked

    async def delete_locked_slot(self, date: str, time: str) -> bool:
        async with self._lock:
            return self._locked_slots.pop((date, time), None) is not None

    async def get_locked_slot(self, date: str, time: str) -> LockedTimeSlot | None:
        async with self._lock:
            return self._locked_slots.get((date, time))

    async def list_locked_slots(self, date: str | None = None) -> list[LockedTimeSlot]:
        async with self._lock:
            return [s for s in self._locked_slots.values() if date is None or s.date == date]
