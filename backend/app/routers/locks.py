from fastapi import APIRouter, Depends, Query, Response, status

from backend.app.core.auth import require_staff
from backend.app.deps import Components, get_components
from backend.app.routers.schemas import LockDateIn, LockedDateOut, LockedTimeSlotOut, LockSlotIn


router = APIRouter()


@router.get("/locked-dates", response_model=list[LockedDateOut])
async def list_locked_dates(components: Components = Depends(get_components)) -> list[LockedDateOut]:
    return [LockedDateOut.from_record(r) for r in await components.locks.list_locked_dates()]


@router.post(
    "/locked-dates",
    response_model=LockedDateOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_staff)],
)
async def lock_date(payload: LockDateIn, components: Components = Depends(get_components)) -> LockedDateOut:
    return LockedDateOut.from_record(await components.locks.lock_date(payload.date, payload.reason))


@router.delete(
    "/locked-dates",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_staff)],
)
async def unlock_date(
    date: str = Query(...),
    components: Components = Depends(get_components),
) -> Response:
    await components.locks.unlock_date(date)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/locked-time-slots", response_model=list[LockedTimeSlotOut])
async def list_locked_time_slots(
    date: str | None = Query(default=None),
    components: Components = Depends(get_components),
) -> list[LockedTimeSlotOut]:
    return [LockedTimeSlotOut.from_record(r) for r in await components.locks.list_locked_slots(date)]


@router.post(
    "/locked-time-slots",
    response_model=LockedTimeSlotOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_staff)],
)
async def lock_time_slot(payload: LockSlotIn, components: Components = Depends(get_components)) -> LockedTimeSlotOut:
    record = await components.locks.lock_slot(payload.date, payload.time, payload.reason)
    return LockedTimeSlotOut.from_record(record)


@router.delete(
    "/locked-time-slots",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_staff)],
)
async def unlock_time_slot(
    date: str = Query(...),
    time: str = Query(...),
    components: Components = Depends(get_components),
) -> Response:
    await components.locks.unlock_slot(date, time)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
