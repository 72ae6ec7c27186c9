"""Domain records shared by the store implementations and the services."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


# pending -> confirmed -> completed, any non-terminal -> cancelled
FORWARD_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def is_forward_transition(current: BookingStatus, new: BookingStatus) -> bool:
    return new == current or new in FORWARD_TRANSITIONS[current]


@dataclass(frozen=True)
class ServiceItem:
    id: str
    name: str
    name_vi: str
    name_de: str
    price: Decimal
    duration: int  # minutes
    category: str
    category_vi: str = ""
    category_de: str = ""
    price_from: bool = False

    def display_name(self, lang: str) -> str:
        if lang == "vi":
            return self.name_vi or self.name
        if lang == "de":
            return self.name_de or self.name
        return self.name

    def display_category(self, lang: str) -> str:
        if lang == "vi":
            return self.category_vi or self.category
        if lang == "de":
            return self.category_de or self.category
        return self.category

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "name_vi": self.name_vi,
            "name_de": self.name_de,
            "price": str(self.price),
            "duration": self.duration,
            "category": self.category,
            "category_vi": self.category_vi,
            "category_de": self.category_de,
            "price_from": self.price_from,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ServiceItem":
        return cls(
            id=data["id"],
            name=data["name"],
            name_vi=data.get("name_vi", ""),
            name_de=data.get("name_de", ""),
            price=Decimal(str(data["price"])),
            duration=int(data["duration"]),
            category=data.get("category", ""),
            category_vi=data.get("category_vi", ""),
            category_de=data.get("category_de", ""),
            price_from=bool(data.get("price_from", False)),
        )


@dataclass(frozen=True)
class Booking:
    id: str
    customer_name: str
    customer_phone: str
    customer_email: str
    services: tuple[ServiceItem, ...]
    date: str
    time: str
    created_at: datetime
    total_price: Decimal
    total_duration: int
    notes: str = ""
    status: BookingStatus = BookingStatus.PENDING

    def with_status(self, status: BookingStatus) -> "Booking":
        return replace(self, status=status)


@dataclass(frozen=True)
class LockedDate:
    date: str
    created_at: datetime
    reason: str = ""


@dataclass(frozen=True)
class LockedTimeSlot:
    date: str
    time: str
    created_at: datetime
    reason: str = ""


@dataclass(frozen=True)
class SlotAvailability:
    booking_count: int
    is_locked: bool
    available: bool


@dataclass(frozen=True)
class DayAvailability:
    time_slot_counts: dict[str, int] = field(default_factory=dict)
    total_bookings: int = 0
