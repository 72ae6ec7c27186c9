from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field

from backend.app.core.clock import Clock, parse_date, parse_time
from backend.app.core.errors import DateLocked, DateUnavailable, InvalidInput, SlotLocked, SlotPassed
from backend.app.models import Booking, BookingStatus
from backend.app.services.catalog import resolve_services, totals
from backend.app.services.ledger import BookingLedger
from backend.app.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

_ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def generate_booking_id() -> str:
    """Short opaque id, e.g. ``BK-7Q2M9XKD``."""
    return "BK-" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(8))


@dataclass
class BookingRequest:
    id: str
    customer_name: str
    customer_phone: str
    customer_email: str
    service_ids: list[str] = field(default_factory=list)
    date: str = ""
    time: str = ""
    notes: str = ""


class AdmissionGate:
    """Write path for new bookings.

    Input is validated before any shared state is touched. Calendar rules come
    from the salon clock; lock state is never taken from the caller but checked
    by the store inside the same atomic write that inserts the booking.
    """

    def __init__(self, ledger: BookingLedger, clock: Clock, dispatcher: NotificationDispatcher) -> None:
        self.ledger = ledger
        self.clock = clock
        self.dispatcher = dispatcher

    def validate(self, request: BookingRequest) -> Booking:
        missing = [
            name
            for name in ("id", "customer_name", "customer_phone", "customer_email")
            if not (getattr(request, name) or "").strip()
        ]
        if missing:
            raise InvalidInput(
                "Booking must have id, customer_name, customer_phone and customer_email",
                fields=missing,
            )
        if "@" not in request.customer_email:
            raise InvalidInput("customer_email is not an email address", field="customer_email")

        date = parse_date(request.date)
        time = parse_time(request.time)
        services = resolve_services(request.service_ids)
        total_price, total_duration = totals(services)

        return Booking(
            id=request.id.strip(),
            customer_name=request.customer_name.strip(),
            customer_phone=request.customer_phone.strip(),
            customer_email=request.customer_email.strip(),
            services=services,
            date=date,
            time=time,
            notes=request.notes or "",
            status=BookingStatus.PENDING,
            created_at=self.clock.now(),
            total_price=total_price,
            total_duration=total_duration,
        )

    def check_calendar(self, booking: Booking) -> None:
        if self.clock.is_past(booking.date):
            raise DateUnavailable("Date is in the past", date=booking.date)
        if self.clock.is_sunday(booking.date):
            raise DateUnavailable("The salon is closed on Sundays", date=booking.date)
        if self.clock.is_slot_passed(booking.date, booking.time):
            raise SlotPassed("Time slot has already started", date=booking.date, time=booking.time)

    async def submit(self, request: BookingRequest) -> Booking:
        booking = self.validate(request)
        self.check_calendar(booking)
        try:
            booking = await self.ledger.create(booking)
        except (DateLocked, SlotLocked) as exc:
            logger.warning("booking %s rejected for %s %s: %s", booking.id, booking.date, booking.time, exc.code)
            raise
        logger.info(
            "booking %s admitted for %s %s (%d services, %s EUR)",
            booking.id,
            booking.date,
            booking.time,
            len(booking.services),
            booking.total_price,
        )
        self.dispatcher.dispatch(booking)
        return booking
