"""New-booking notifications for staff.

Delivery is fire-and-forget: the admission gate hands the booking to the
dispatcher and returns; the push worker draining the Redis queue owns the
actual Web-Push transport.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Protocol

from backend.app.core import redis_client as redis_module
from backend.app.models import Booking

logger = logging.getLogger(__name__)


def new_booking_message(booking: Booking) -> str:
    return (
        "🔔 Neue Buchung erhalten!\n"
        f"{booking.customer_name} - {booking.date} um {booking.time} Uhr\n"
        f"€{booking.total_price:.2f}"
    )


def new_booking_payload(booking: Booking) -> dict:
    return {
        "type": "booking.created",
        "title": "Neue Buchung",
        "body": new_booking_message(booking),
        "booking_id": booking.id,
        "date": booking.date,
        "time": booking.time,
    }


class Notifier(Protocol):
    async def send(self, payload: dict) -> None: ...


class RedisQueueNotifier:
    """Pushes payloads onto a Redis list consumed by the push worker."""

    def __init__(self, queue_key: str) -> None:
        self.queue_key = queue_key

    async def send(self, payload: dict) -> None:
        if redis_module.redis_client is None:
            raise RuntimeError("Redis unavailable")
        await redis_module.redis_client.lpush(self.queue_key, json.dumps(payload, ensure_ascii=False))


class LogNotifier:
    """Used when no queue is configured; the notification only reaches the log."""

    async def send(self, payload: dict) -> None:
        logger.info("new booking notification (no queue configured): %s", payload["body"])


class NotificationDispatcher:
    def __init__(self, notifier: Notifier, *, timeout: float) -> None:
        self.notifier = notifier
        self.timeout = timeout
        self._tasks: set[asyncio.Task] = set()

    def dispatch(self, booking: Booking) -> asyncio.Task:
        """Schedule delivery and return immediately."""
        task = asyncio.create_task(self._deliver(booking), name=f"notify-{booking.id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver(self, booking: Booking) -> None:
        try:
            await asyncio.wait_for(self.notifier.send(new_booking_payload(booking)), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("notification for booking %s timed out after %.1fs", booking.id, self.timeout)
        except Exception:
            logger.warning("notification for booking %s failed", booking.id, exc_info=True)
        else:
            logger.info("notification for booking %s queued", booking.id)

    async def drain(self) -> None:
        """Wait for in-flight deliveries; used on shutdown and in tests."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
