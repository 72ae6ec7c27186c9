from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Protocol, TypeVar

from backend.app.core.errors import StorageError
from backend.app.models import Booking, BookingStatus, LockedDate, LockedTimeSlot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BookingStore(Protocol):
    """Persistence boundary for bookings and lock records.

    ``commit_booking`` is the single atomic conditional write: it inserts the
    booking only if neither its date nor its (date, time) slot is locked at the
    instant of the insert, raising ``DateLocked`` / ``SlotLocked`` otherwise.
    Lock inserts for a date are serialized with it.
    """

    async def ping(self) -> None: ...

    async def commit_booking(self, booking: Booking) -> Booking: ...

    async def get_booking(self, booking_id: str) -> Booking | None: ...

    async def list_bookings(self, date: str | None = None) -> list[Booking]: ...

    async def count_active_bookings(self, date: str, time: str | None = None) -> dict[str, int]: ...

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> Booking | None: ...

    async def delete_booking(self, booking_id: str) -> bool: ...

    async def insert_locked_date(self, locked: LockedDate) -> LockedDate: ...

    async def delete_locked_date(self, date: str) -> bool: ...

    async def get_locked_date(self, date: str) -> LockedDate | None: ...

    async def list_locked_dates(self) -> list[LockedDate]: ...

    async def insert_locked_slot(self, locked: LockedTimeSlot) -> LockedTimeSlot: ...

    async def delete_locked_slot(self, date: str, time: str) -> bool: ...

    async def get_locked_slot(self, date: str, time: str) -> LockedTimeSlot | None: ...

    async def list_locked_slots(self, date: str | None = None) -> list[LockedTimeSlot]: ...


async def bounded(awaitable: Awaitable[T], *, timeout: float, operation: str) -> T:
    """Await a store call, turning a timeout into a retryable StorageError."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.error("store operation %s timed out after %.1fs", operation, timeout)
        raise StorageError(f"{operation} timed out", retryable=True, operation=operation) from exc
