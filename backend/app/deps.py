from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from backend.app.core.clock import Clock
from backend.app.core.config import settings
from backend.app.services.admission import AdmissionGate
from backend.app.services.availability import AvailabilityResolver
from backend.app.services.ledger import BookingLedger
from backend.app.services.locks import LockRegistry
from backend.app.services.notifications import LogNotifier, NotificationDispatcher, Notifier, RedisQueueNotifier
from backend.app.store.base import BookingStore


@dataclass
class Components:
    clock: Clock
    store: BookingStore
    locks: LockRegistry
    availability: AvailabilityResolver
    ledger: BookingLedger
    gate: AdmissionGate
    dispatcher: NotificationDispatcher


def default_store() -> BookingStore:
    if settings.STORAGE_BACKEND == "memory":
        from backend.app.store.memory import MemoryStore

        return MemoryStore()

    from backend.app.db.session import SessionLocal
    from backend.app.store.postgres import PostgresStore

    return PostgresStore(SessionLocal)


def default_notifier() -> Notifier:
    if settings.REDIS_URL:
        return RedisQueueNotifier(settings.NOTIFY_QUEUE_KEY)
    return LogNotifier()


def build_components(
    store: BookingStore,
    *,
    clock: Clock | None = None,
    notifier: Notifier | None = None,
    store_timeout: float | None = None,
) -> Components:
    clock = clock or Clock(settings.BUSINESS_UTC_OFFSET_MINUTES)
    timeout = store_timeout if store_timeout is not None else settings.STORE_TIMEOUT_SECONDS
    dispatcher = NotificationDispatcher(notifier or default_notifier(), timeout=settings.NOTIFY_TIMEOUT_SECONDS)
    locks = LockRegistry(store, clock, timeout=timeout)
    ledger = BookingLedger(store, timeout=timeout)
    return Components(
        clock=clock,
        store=store,
        locks=locks,
        availability=AvailabilityResolver(store, locks, clock, timeout=timeout),
        ledger=ledger,
        gate=AdmissionGate(ledger, clock, dispatcher),
        dispatcher=dispatcher,
    )


def get_components(request: Request) -> Components:
    return request.app.state.components
