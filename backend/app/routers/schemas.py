from datetime import datetime

from pydantic import BaseModel, Field

from backend.app.models import (
    Booking,
    BookingStatus,
    DayAvailability,
    LockedDate,
    LockedTimeSlot,
    ServiceItem,
    SlotAvailability,
)


class ServiceOut(BaseModel):
    id: str
    name: str
    category: str
    price: float
    price_from: bool
    duration: int

    @classmethod
    def from_item(cls, item: ServiceItem, lang: str) -> "ServiceOut":
        return cls(
            id=item.id,
            name=item.display_name(lang),
            category=item.display_category(lang),
            price=float(item.price),
            price_from=item.price_from,
            duration=item.duration,
        )


class BookedServiceOut(BaseModel):
    id: str
    name: str
    name_vi: str
    name_de: str
    price: float
    duration: int


class BookingCreateIn(BaseModel):
    # Omit to let the server generate one.
    id: str | None = Field(default=None, max_length=64)
    customer_name: str = Field(default="", max_length=200)
    customer_phone: str = Field(default="", max_length=32)
    customer_email: str = Field(default="", max_length=254)
    # Catalog ids in the order the customer picked them
    services: list[str] = Field(default_factory=list, max_length=20)
    date: str = Field(default="", max_length=10)  # YYYY-MM-DD, salon clock
    time: str = Field(default="", max_length=5)  # slot label, e.g. "14:30"
    notes: str | None = Field(default=None, max_length=1024)


class BookingOut(BaseModel):
    id: str
    customer_name: str
    customer_phone: str
    customer_email: str
    services: list[BookedServiceOut]
    date: str
    time: str
    notes: str
    status: BookingStatus
    created_at: datetime
    total_price: float
    total_duration: int

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingOut":
        return cls(
            id=booking.id,
            customer_name=booking.customer_name,
            customer_phone=booking.customer_phone,
            customer_email=booking.customer_email,
            services=[
                BookedServiceOut(
                    id=s.id,
                    name=s.name,
                    name_vi=s.name_vi,
                    name_de=s.name_de,
                    price=float(s.price),
                    duration=s.duration,
                )
                for s in booking.services
            ],
            date=booking.date,
            time=booking.time,
            notes=booking.notes,
            status=booking.status,
            created_at=booking.created_at,
            total_price=float(booking.total_price),
            total_duration=booking.total_duration,
        )


class StatusUpdateIn(BaseModel):
    status: BookingStatus


class SlotAvailabilityOut(BaseModel):
    booking_count: int
    is_locked: bool
    available: bool

    @classmethod
    def from_result(cls, result: SlotAvailability) -> "SlotAvailabilityOut":
        return cls(booking_count=result.booking_count, is_locked=result.is_locked, available=result.available)


class DayAvailabilityOut(BaseModel):
    time_slot_counts: dict[str, int]
    total_bookings: int

    @classmethod
    def from_result(cls, result: DayAvailability) -> "DayAvailabilityOut":
        return cls(time_slot_counts=dict(result.time_slot_counts), total_bookings=result.total_bookings)


class TimeSlotOut(BaseModel):
    time: str
    passed: bool = False
    locked: bool = False


class TimeSlotGridOut(BaseModel):
    date: str | None = None
    today: str
    past: bool = False
    sunday: bool = False
    date_locked: bool = False
    slots: list[TimeSlotOut]


class LockDateIn(BaseModel):
    date: str = Field(max_length=10)
    reason: str | None = Field(default=None, max_length=500)


class LockSlotIn(BaseModel):
    date: str = Field(max_length=10)
    time: str = Field(max_length=5)
    reason: str | None = Field(default=None, max_length=500)


class LockedDateOut(BaseModel):
    date: str
    reason: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: LockedDate) -> "LockedDateOut":
        return cls(date=record.date, reason=record.reason, created_at=record.created_at)


class LockedTimeSlotOut(BaseModel):
    date: str
    time: str
    reason: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: LockedTimeSlot) -> "LockedTimeSlotOut":
        return cls(date=record.date, time=record.time, reason=record.reason, created_at=record.created_at)
