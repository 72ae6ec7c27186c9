from __future__ import annotations

import logging

from backend.app.core.errors import NotFound
from backend.app.models import Booking, BookingStatus, is_forward_transition
from backend.app.store.base import BookingStore, bounded

logger = logging.getLogger(__name__)


class BookingLedger:
    """Authoritative booking records.

    New bookings enter only through ``AdmissionGate.submit``; staff may change
    status or delete. Any status may be set from any other, a backwards move
    is logged so it can be audited.
    """

    def __init__(self, store: BookingStore, *, timeout: float) -> None:
        self.store = store
        self.timeout = timeout

    async def create(self, booking: Booking) -> Booking:
        return await bounded(self.store.commit_booking(booking), timeout=self.timeout, operation="commit_booking")

    async def get(self, booking_id: str) -> Booking:
        booking = await bounded(self.store.get_booking(booking_id), timeout=self.timeout, operation="get_booking")
        if booking is None:
            raise NotFound("Booking not found", booking_id=booking_id)
        return booking

    async def list_all(self, date: str | None = None) -> list[Booking]:
        return await bounded(self.store.list_bookings(date), timeout=self.timeout, operation="list_bookings")

    async def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        current = await self.get(booking_id)
        if not is_forward_transition(current.status, status):
            logger.warning(
                "booking %s status moved backwards: %s -> %s", booking_id, current.status.value, status.value
            )
        updated = await bounded(
            self.store.update_booking_status(booking_id, status),
            timeout=self.timeout,
            operation="update_booking_status",
        )
        if updated is None:
            raise NotFound("Booking not found", booking_id=booking_id)
        logger.info("booking %s status %s -> %s", booking_id, current.status.value, status.value)
        return updated

    async def delete(self, booking_id: str) -> None:
        removed = await bounded(self.store.delete_booking(booking_id), timeout=self.timeout, operation="delete_booking")
        if not removed:
            raise NotFound("Booking not found", booking_id=booking_id)
        logger.info("booking %s deleted", booking_id)
