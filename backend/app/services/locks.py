from __future__ import annotations

import logging

from backend.app.core.clock import Clock, parse_date, parse_time
from backend.app.core.errors import NotFound
from backend.app.models import LockedDate, LockedTimeSlot
from backend.app.store.base import BookingStore, bounded

logger = logging.getLogger(__name__)


class LockRegistry:
    """Staff-managed date and slot locks.

    Date locks and slot locks are independent: locking a day creates no slot
    records, and removing a slot lock under a locked day changes nothing
    until the day itself is unlocked.
    """

    def __init__(self, store: BookingStore, clock: Clock, *, timeout: float) -> None:
        self.store = store
        self.clock = clock
        self.timeout = timeout

    async def lock_date(self, date: str, reason: str | None = None) -> LockedDate:
        locked = LockedDate(date=parse_date(date), reason=reason or "", created_at=self.clock.now())
        await bounded(self.store.insert_locked_date(locked), timeout=self.timeout, operation="lock_date")
        logger.info("locked date %s (%s)", date, locked.reason or "no reason")
        return locked

    async def unlock_date(self, date: str) -> None:
        removed = await bounded(
            self.store.delete_locked_date(parse_date(date)), timeout=self.timeout, operation="unlock_date"
        )
        if not removed:
            raise NotFound("Locked date not found", date=date)
        logger.info("unlocked date %s", date)

    async def lock_slot(self, date: str, time: str, reason: str | None = None) -> LockedTimeSlot:
        locked = LockedTimeSlot(
            date=parse_date(date),
            time=parse_time(time),
            reason=reason or "",
            created_at=self.clock.now(),
        )
        await bounded(self.store.insert_locked_slot(locked), timeout=self.timeout, operation="lock_slot")
        logger.info("locked slot %s %s (%s)", date, time, locked.reason or "no reason")
        return locked

    async def unlock_slot(self, date: str, time: str) -> None:
        removed = await bounded(
            self.store.delete_locked_slot(parse_date(date), parse_time(time)),
            timeout=self.timeout,
            operation="unlock_slot",
        )
        if not removed:
            raise NotFound("Locked time slot not found", date=date, time=time)
        logger.info("unlocked slot %s %s", date, time)

    async def is_date_locked(self, date: str) -> bool:
        found = await bounded(self.store.get_locked_date(date), timeout=self.timeout, operation="is_date_locked")
        return found is not None

    async def is_slot_locked(self, date: str, time: str) -> bool:
        found = await bounded(self.store.get_locked_slot(date, time), timeout=self.timeout, operation="is_slot_locked")
        return found is not None

    async def list_locked_dates(self) -> list[LockedDate]:
        return await bounded(self.store.list_locked_dates(), timeout=self.timeout, operation="list_locked_dates")

    async def list_locked_slots(self, date: str | None = None) -> list[LockedTimeSlot]:
        if date is not None:
            parse_date(date)
        return await bounded(self.store.list_locked_slots(date), timeout=self.timeout, operation="list_locked_slots")
