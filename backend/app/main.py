import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.app.core.config import settings
from backend.app.core.errors import BookingError, InvalidInput, StorageError
from backend.app.core.logging_context import configure_logging, set_request_id
from backend.app.core.messages import message_for, pick_locale
from backend.app.core.redis_client import close_redis, init_redis
from backend.app.deps import build_components, default_store
import backend.app.routers.availability as availability
import backend.app.routers.bookings as bookings
import backend.app.routers.catalog as catalog
import backend.app.routers.health as health
import backend.app.routers.locks as locks


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    await init_redis()
    app.state.components = build_components(default_store())
    try:
        yield
    finally:
        await app.state.components.dispatcher.drain()
        await close_redis()


app = FastAPI(
    title="Salon Booking API",
    lifespan=lifespan,
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    set_request_id(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    locale = pick_locale(request.query_params.get("lang"), request.headers.get("accept-language"))
    headers = {}
    if isinstance(exc, StorageError) and exc.retryable:
        headers["Retry-After"] = "1"
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.code,
            "message": message_for(exc.code, locale),
            "detail": exc.message,
        },
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    locale = pick_locale(request.query_params.get("lang"), request.headers.get("accept-language"))
    return JSONResponse(
        status_code=422,
        content={
            "code": InvalidInput.code,
            "message": message_for(InvalidInput.code, locale),
            "detail": jsonable_encoder(exc.errors()),
        },
    )


# check-availability must be matched before /bookings/{booking_id}
app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(catalog.router, prefix=settings.API_PREFIX)
app.include_router(availability.router, prefix=settings.API_PREFIX)
app.include_router(bookings.router, prefix=settings.API_PREFIX)
app.include_router(locks.router, prefix=settings.API_PREFIX)
