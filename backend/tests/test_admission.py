import asyncio
import logging
from decimal import Decimal

import pytest

from backend.app.core.errors import (
    Conflict,
    DateLocked,
    DateUnavailable,
    InvalidInput,
    SlotLocked,
    SlotPassed,
    StorageError,
)
from backend.app.deps import build_components
from backend.app.models import BookingStatus
from backend.app.store.memory import MemoryStore
from backend.tests.factories import booking_request

pytestmark = pytest.mark.asyncio


class SlowStore(MemoryStore):
    async def commit_booking(self, booking):
        await asyncio.sleep(1)
        return await super().commit_booking(booking)


class OrderedStore(MemoryStore):
    """Records the order in which admission and lock writes took effect."""

    def __init__(self) -> None:
        super().__init__()
        self.log: list[tuple[str, str]] = []

    async def commit_booking(self, booking):
        try:
            result = await super().commit_booking(booking)
        except SlotLocked:
            self.log.append(("rejected", booking.id))
            raise
        self.log.append(("admitted", booking.id))
        return result

    async def insert_locked_slot(self, locked):
        result = await super().insert_locked_slot(locked)
        self.log.append(("locked", locked.time))
        return result


class FailingNotifier:
    async def send(self, payload):
        raise RuntimeError("push service down")


class HangingNotifier:
    async def send(self, payload):
        await asyncio.Event().wait()


async def test_submit_persists_pending_booking(components):
    booking = await components.gate.submit(booking_request(notes="first visit"))

    assert booking.status is BookingStatus.PENDING
    assert booking.created_at == components.clock.now()
    assert [s.id for s in booking.services] == ["mani-classic", "nail-art"]
    assert booking.total_price == Decimal("30")
    assert booking.total_duration == 45
    assert await components.ledger.get(booking.id) == booking


@pytest.mark.parametrize("field", ["id", "customer_name", "customer_phone", "customer_email"])
async def test_missing_required_field(components, field):
    with pytest.raises(InvalidInput) as excinfo:
        await components.gate.submit(booking_request(**{field: "   "}))
    assert excinfo.value.context["fields"] == [field]
    assert await components.ledger.list_all() == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"customer_email": "anna.example.com"},
        {"time": "14:15"},
        {"time": ""},
        {"date": "2025-6-10"},
        {"service_ids": []},
        {"service_ids": ["mani-classic", "eyebrows"]},
    ],
)
async def test_malformed_input_rejected(components, overrides):
    with pytest.raises(InvalidInput):
        await components.gate.submit(booking_request(**overrides))
    assert await components.ledger.list_all() == []


async def test_invalid_input_checked_before_locks(components):
    await components.locks.lock_date("2025-06-10")
    with pytest.raises(InvalidInput):
        await components.gate.submit(booking_request(customer_name=""))


async def test_locked_date_scenario(components):
    await components.locks.lock_date("2025-12-25", "Christmas")

    with pytest.raises(DateLocked) as excinfo:
        await components.gate.submit(booking_request(date="2025-12-25", time="10:00"))
    assert not isinstance(excinfo.value, DateUnavailable)

    await components.locks.unlock_date("2025-12-25")
    booking = await components.gate.submit(booking_request(date="2025-12-25", time="10:00"))
    assert booking.date == "2025-12-25"


async def test_locked_date_blocks_every_slot(components):
    await components.locks.lock_date("2025-06-10")
    for index, time in enumerate(("09:00", "12:30", "19:30")):
        with pytest.raises(DateLocked):
            await components.gate.submit(booking_request(id=f"BK-{index}", time=time))


async def test_unlocked_date_still_honours_slot_lock(components):
    await components.locks.lock_date("2025-06-10")
    await components.locks.lock_slot("2025-06-10", "14:00")
    await components.locks.unlock_date("2025-06-10")

    with pytest.raises(SlotLocked):
        await components.gate.submit(booking_request(time="14:00"))
    assert await components.gate.submit(booking_request(time="14:30"))


async def test_locked_slot_rejected_until_unlocked(components):
    await components.locks.lock_slot("2025-06-10", "14:00")
    with pytest.raises(SlotLocked):
        await components.gate.submit(booking_request())

    await components.locks.unlock_slot("2025-06-10", "14:00")
    assert (await components.gate.submit(booking_request())).time == "14:00"


async def test_past_date_rejected(components):
    with pytest.raises(DateUnavailable):
        await components.gate.submit(booking_request(date="2025-06-02", time="15:00"))


async def test_sunday_rejected(components):
    with pytest.raises(DateUnavailable):
        await components.gate.submit(booking_request(date="2025-06-08"))


async def test_same_day_booking(components):
    with pytest.raises(SlotPassed):
        await components.gate.submit(booking_request(date="2025-06-03", time="09:30"))
    booking = await components.gate.submit(booking_request(date="2025-06-03", time="11:00"))
    assert booking.date == components.clock.today()


async def test_duplicate_id_conflicts(components):
    await components.gate.submit(booking_request())
    with pytest.raises(Conflict):
        await components.gate.submit(booking_request(time="15:00"))
    assert len(await components.ledger.list_all()) == 1


async def test_multiple_bookings_share_a_slot(components):
    await components.gate.submit(booking_request(id="BK-A"))
    await components.gate.submit(booking_request(id="BK-B"))
    assert len(await components.ledger.list_all("2025-06-10")) == 2


async def test_new_booking_notifies_staff(components, notifier):
    await components.gate.submit(booking_request())
    await components.dispatcher.drain()

    assert len(notifier.sent) == 1
    payload = notifier.sent[0]
    assert payload["booking_id"] == "BK-TEST0001"
    assert payload["body"] == "🔔 Neue Buchung erhalten!\nAnna Schmidt - 2025-06-10 um 14:00 Uhr\n€30.00"


async def test_rejected_booking_sends_nothing(components, notifier):
    await components.locks.lock_slot("2025-06-10", "14:00")
    with pytest.raises(SlotLocked):
        await components.gate.submit(booking_request())
    await components.dispatcher.drain()
    assert notifier.sent == []


async def test_notification_failure_keeps_booking(store, clock, caplog):
    components = build_components(store, clock=clock, notifier=FailingNotifier())
    with caplog.at_level(logging.WARNING, logger="backend.app.services.notifications"):
        booking = await components.gate.submit(booking_request())
        await components.dispatcher.drain()

    assert await components.ledger.get(booking.id) == booking
    assert "failed" in caplog.text


async def test_hanging_notifier_does_not_block_admission(store, clock):
    components = build_components(store, clock=clock, notifier=HangingNotifier())
    components.dispatcher.timeout = 0.05

    booking = await asyncio.wait_for(components.gate.submit(booking_request()), timeout=1)
    await components.dispatcher.drain()
    assert await components.ledger.get(booking.id) == booking


async def test_store_timeout_is_retryable_and_leaves_nothing(clock, notifier):
    store = SlowStore()
    components = build_components(store, clock=clock, notifier=notifier, store_timeout=0.05)

    with pytest.raises(StorageError) as excinfo:
        await components.gate.submit(booking_request())
    assert excinfo.value.retryable
    assert await store.list_bookings() == []
    assert notifier.sent == []


async def test_concurrent_submits_race_a_slot_lock(clock, notifier):
    store = OrderedStore()
    components = build_components(store, clock=clock, notifier=notifier)

    results = await asyncio.gather(
        components.gate.submit(booking_request(id="BK-1", date="2025-06-10", time="14:00")),
        components.locks.lock_slot("2025-06-10", "14:00"),
        components.gate.submit(booking_request(id="BK-2", date="2025-06-10", time="14:00")),
        return_exceptions=True,
    )

    lock_position = store.log.index(("locked", "14:00"))
    for position, (event, booking_id) in enumerate(store.log):
        if event == "admitted":
            assert position < lock_position
        if event == "rejected":
            assert position > lock_position

    admitted = {booking_id for event, booking_id in store.log if event == "admitted"}
    assert {b.id for b in await components.ledger.list_all()} == admitted
    for result in (results[0], results[2]):
        assert not isinstance(result, Exception) or isinstance(result, SlotLocked)

    with pytest.raises(SlotLocked):
        await components.gate.submit(booking_request(id="BK-3"))


async def test_lock_after_booking_does_not_remove_it(components):
    await components.gate.submit(booking_request(id="BK-1"))
    await components.locks.lock_slot("2025-06-10", "14:00")

    with pytest.raises(SlotLocked):
        await components.gate.submit(booking_request(id="BK-2"))
    assert [b.id for b in await components.ledger.list_all()] == ["BK-1"]
