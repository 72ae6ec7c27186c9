from fastapi import APIRouter, Depends, Query, Response, status

from backend.app.core.auth import require_staff
from backend.app.core.clock import parse_date
from backend.app.deps import Components, get_components
from backend.app.routers.schemas import BookingCreateIn, BookingOut, StatusUpdateIn
from backend.app.services.admission import BookingRequest, generate_booking_id


router = APIRouter()


@router.post("/bookings", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreateIn,
    components: Components = Depends(get_components),
) -> BookingOut:
    request = BookingRequest(
        id=payload.id if payload.id is not None else generate_booking_id(),
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        customer_email=payload.customer_email,
        service_ids=payload.services,
        date=payload.date,
        time=payload.time,
        notes=payload.notes or "",
    )
    booking = await components.gate.submit(request)
    return BookingOut.from_booking(booking)


@router.get("/bookings", response_model=list[BookingOut], dependencies=[Depends(require_staff)])
async def list_bookings(
    date: str | None = Query(default=None),
    components: Components = Depends(get_components),
) -> list[BookingOut]:
    if date is not None:
        parse_date(date)
    bookings = await components.ledger.list_all(date)
    return [BookingOut.from_booking(b) for b in bookings]


@router.get("/bookings/{booking_id}", response_model=BookingOut)
async def get_booking(booking_id: str, components: Components = Depends(get_components)) -> BookingOut:
    return BookingOut.from_booking(await components.ledger.get(booking_id))


@router.patch("/bookings/{booking_id}/status", response_model=BookingOut, dependencies=[Depends(require_staff)])
async def update_booking_status(
    booking_id: str,
    payload: StatusUpdateIn,
    components: Components = Depends(get_components),
) -> BookingOut:
    return BookingOut.from_booking(await components.ledger.update_status(booking_id, payload.status))


@router.delete(
    "/bookings/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_staff)],
)
async def delete_booking(booking_id: str, components: Components = Depends(get_components)) -> Response:
    await components.ledger.delete(booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
