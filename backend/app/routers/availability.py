from fastapi import APIRouter, Depends, Query

from backend.app.core.clock import TIME_SLOTS
from backend.app.deps import Components, get_components
from backend.app.models import SlotAvailability
from backend.app.routers.schemas import DayAvailabilityOut, SlotAvailabilityOut, TimeSlotGridOut, TimeSlotOut

router = APIRouter()


@router.get(
    "/bookings/check-availability",
    response_model=SlotAvailabilityOut | DayAvailabilityOut,
)
async def check_availability(
    date: str = Query(...),
    time: str | None = Query(default=None),
    components: Components = Depends(get_components),
) -> SlotAvailabilityOut | DayAvailabilityOut:
    """Informational view; the booking write path re-checks locks itself."""
    result = await components.availability.resolve(date, time)
    if isinstance(result, SlotAvailability):
        return SlotAvailabilityOut.from_result(result)
    return DayAvailabilityOut.from_result(result)


@router.get("/time-slots", response_model=TimeSlotGridOut)
async def time_slots(
    date: str | None = Query(default=None),
    components: Components = Depends(get_components),
) -> TimeSlotGridOut:
    today = components.clock.today()
    if date is None:
        return TimeSlotGridOut(today=today, slots=[TimeSlotOut(time=t) for t in TIME_SLOTS])

    grid = await components.availability.slot_grid(date)
    return TimeSlotGridOut(
        date=grid["date"],
        today=today,
        past=grid["past"],
        sunday=grid["sunday"],
        date_locked=grid["date_locked"],
        slots=[TimeSlotOut(**slot) for slot in grid["slots"]],
    )
