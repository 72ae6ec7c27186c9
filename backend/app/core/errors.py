"""Booking error taxonomy.

Domain components raise these; ``backend.app.main`` maps them onto HTTP
status codes in a single exception handler.
"""


class BookingError(Exception):
    """Base class for every client-visible booking failure."""

    code = "BookingError"
    status_code = 400

    def __init__(self, message: str = "", **context) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.context = context


class InvalidInput(BookingError):
    code = "InvalidInput"
    status_code = 422


class DateLocked(BookingError):
    code = "DateLocked"
    status_code = 409


class DateUnavailable(DateLocked):
    """Date rejected by a calendar rule (Sunday, already past) rather than a lock record."""


class SlotLocked(BookingError):
    code = "SlotLocked"
    status_code = 409


class SlotPassed(SlotLocked):
    """Same-day slot whose start time is already behind the salon clock."""


class Conflict(BookingError):
    code = "Conflict"
    status_code = 409


class NotFound(BookingError):
    code = "NotFound"
    status_code = 404


class StorageError(BookingError):
    """Backing store unreachable or the operation failed; safe to retry with backoff."""

    code = "StorageError"
    status_code = 503

    def __init__(self, message: str = "", *, retryable: bool = True, **context) -> None:
        super().__init__(message, **context)
        self.retryable = retryable
