from __future__ import annotations

import json
import logging
from datetime import date as date_cls
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.core.errors import Conflict, DateLocked, SlotLocked, StorageError
from backend.app.models import Booking, BookingStatus, LockedDate, LockedTimeSlot, ServiceItem

logger = logging.getLogger(__name__)

_BOOKING_COLUMNS = """
    id, customer_name, customer_phone, customer_email, services,
    booking_date, slot_time, notes, status, created_at,
    total_price, total_duration
"""


def _day(value: str) -> date_cls:
    return date_cls.fromisoformat(value)


def _booking_from_row(row) -> Booking:
    services = row["services"]
    if isinstance(services, str):
        services = json.loads(services)
    return Booking(
        id=row["id"],
        customer_name=row["customer_name"],
        customer_phone=row["customer_phone"],
        customer_email=row["customer_email"],
        services=tuple(ServiceItem.from_dict(item) for item in services),
        date=row["booking_date"].isoformat(),
        time=row["slot_time"],
        notes=row["notes"],
        status=BookingStatus(row["status"]),
        created_at=row["created_at"],
        total_price=Decimal(row["total_price"]),
        total_duration=row["total_duration"],
    )


def _storage_error(operation: str, exc: Exception) -> StorageError:
    logger.error("postgres %s failed: %s", operation, exc, exc_info=exc)
    return StorageError(f"{operation} failed", retryable=True, operation=operation)


class PostgresStore:
    """BookingStore backed by the SQL schema in ``sql/``.

    Admission and lock inserts go through the ``commit_booking`` /
    ``lock_date`` / ``lock_time_slot`` functions, which share a per-day
    advisory lock.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def ping(self) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("ping", exc) from exc

    async def commit_booking(self, booking: Booking) -> Booking:
        query = text(
            """
            SELECT commit_booking(
              :id, :name, :phone, :email, CAST(:services AS jsonb),
              :day, :time, :notes, :created_at, :total_price, :total_duration
            ) AS booking_id
            """
        )
        params = {
            "id": booking.id,
            "name": booking.customer_name,
            "phone": booking.customer_phone,
            "email": booking.customer_email,
            "services": json.dumps([service.to_dict() for service in booking.services]),
            "day": _day(booking.date),
            "time": booking.time,
            "notes": booking.notes,
            "created_at": booking.created_at,
            "total_price": booking.total_price,
            "total_duration": booking.total_duration,
        }
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(query, params)
        except IntegrityError as exc:
            raise Conflict(f"Booking {booking.id} already exists", booking_id=booking.id) from exc
        except DBAPIError as exc:
            message = str(getattr(exc, "orig", exc))
            if "Date is locked" in message:
                raise DateLocked("Date is locked", date=booking.date) from exc
            if "Time slot is locked" in message:
                raise SlotLocked("Time slot is locked", date=booking.date, time=booking.time) from exc
            raise _storage_error("commit_booking", exc) from exc
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("commit_booking", exc) from exc
        return booking

    async def get_booking(self, booking_id: str) -> Booking | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    text(f"SELECT {_BOOKING_COLUMNS} FROM booking WHERE id = :id"),
                    {"id": booking_id},
                )
                row = result.mappings().one_or_none()
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("get_booking", exc) from exc
        return _booking_from_row(row) if row is not None else None

    async def list_bookings(self, date: str | None = None) -> list[Booking]:
        sql = f"SELECT {_BOOKING_COLUMNS} FROM booking"
        params: dict = {}
        if date is not None:
            sql += " WHERE booking_date = :day"
            params["day"] = _day(date)
        sql += " ORDER BY booking_date, slot_time, created_at"
        try:
            async with self._session_factory() as session:
                result = await session.execute(text(sql), params)
                rows = result.mappings().all()
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("list_bookings", exc) from exc
        return [_booking_from_row(row) for row in rows]

    async def count_active_bookings(self, date: str, time: str | None = None) -> dict[str, int]:
        sql = """
            SELECT slot_time, COUNT(*) AS bookings
            FROM booking
            WHERE booking_date = :day
              AND status <> 'cancelled'
        """
        params: dict = {"day": _day(date)}
        if time is not None:
            sql += " AND slot_time = :time"
            params["time"] = time
        sql += " GROUP BY slot_time"
        try:
            async with self._session_factory() as session:
                result = await session.execute(text(sql), params)
                rows = result.mappings().all()
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("count_active_bookings", exc) from exc
        return {row["slot_time"]: int(row["bookings"]) for row in rows}

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> Booking | None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        text(
                            f"""
                            UPDATE booking SET status = :status
                            WHERE id = :id
                            RETURNING {_BOOKING_COLUMNS}
                            """
                        ),
                        {"id": booking_id, "status": status.value},
                    )
                    row = result.mappings().one_or_none()
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("update_booking_status", exc) from exc
        return _booking_from_row(row) if row is not None else None

    async def delete_booking(self, booking_id: str) -> bool:
        return await self._delete("delete_booking", "DELETE FROM booking WHERE id = :id", {"id": booking_id})

    async def insert_locked_date(self, locked: LockedDate) -> LockedDate:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(
                        text("SELECT lock_date(:day, :reason, :created_at)"),
                        {"day": _day(locked.date), "reason": locked.reason, "created_at": locked.created_at},
                    )
        except IntegrityError as exc:
            raise Conflict("Date is already locked", date=locked.date) from exc
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("insert_locked_date", exc) from exc
        return locked

    async def delete_locked_date(self, date: str) -> bool:
        return await self._delete(
            "delete_locked_date",
            "DELETE FROM locked_date WHERE locked_day = :day",
            {"day": _day(date)},
        )

    async def get_locked_date(self, date: str) -> LockedDate | None:
        rows = await self._select_locked_dates("WHERE locked_day = :day", {"day": _day(date)})
        return rows[0] if rows else None

    async def list_locked_dates(self) -> list[LockedDate]:
        return await self._select_locked_dates("", {})

    async def insert_locked_slot(self, locked: LockedTimeSlot) -> LockedTimeSlot:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(
                        text("SELECT lock_time_slot(:day, :time, :reason, :created_at)"),
                        {
                            "day": _day(locked.date),
                            "time": locked.time,
                            "reason": locked.reason,
                            "created_at": locked.created_at,
                        },
                    )
        except IntegrityError as exc:
            raise Conflict("Time slot is already locked", date=locked.date, time=locked.time) from exc
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("insert_locked_slot", exc) from exc
        return locked

    async def delete_locked_slot(self, date: str, time: str) -> bool:
        return await self._delete(
            "delete_locked_slot",
            "DELETE FROM locked_time_slot WHERE locked_day = :day AND slot_time = :time",
            {"day": _day(date), "time": time},
        )

    async def get_locked_slot(self, date: str, time: str) -> LockedTimeSlot | None:
        rows = await self._select_locked_slots(
            "WHERE locked_day = :day AND slot_time = :time",
            {"day": _day(date), "time": time},
        )
        return rows[0] if rows else None

    async def list_locked_slots(self, date: str | None = None) -> list[LockedTimeSlot]:
        if date is None:
            return await self._select_locked_slots("", {})
        return await self._select_locked_slots("WHERE locked_day = :day", {"day": _day(date)})

    async def _delete(self, operation: str, sql: str, params: dict) -> bool:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(text(sql), params)
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error(operation, exc) from exc
        return result.rowcount > 0

    async def _select_locked_dates(self, where: str, params: dict) -> list[LockedDate]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    text(f"SELECT locked_day, reason, created_at FROM locked_date {where}"),
                    params,
                )
                rows = result.mappings().all()
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("select_locked_dates", exc) from exc
        return [
            LockedDate(date=row["locked_day"].isoformat(), reason=row["reason"], created_at=row["created_at"])
            for row in rows
        ]

    async def _select_locked_slots(self, where: str, params: dict) -> list[LockedTimeSlot]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    text(f"SELECT locked_day, slot_time, reason, created_at FROM locked_time_slot {where}"),
                    params,
                )
                rows = result.mappings().all()
        except (SQLAlchemyError, OSError) as exc:
            raise _storage_error("select_locked_slots", exc) from exc
        return [
            LockedTimeSlot(
                date=row["locked_day"].isoformat(),
                time=row["slot_time"],
                reason=row["reason"],
                created_at=row["created_at"],
            )
            for row in rows
        ]
