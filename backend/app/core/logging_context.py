"""Request-id aware logging.

Every log record carries ``request_id`` so a single booking attempt can be
followed from the HTTP layer through admission and into the notification task.
"""

import logging
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _request_id.set(request_id)


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install a stream handler on the ``backend`` logger tree."""
    root = logging.getLogger("backend")
    root.setLevel(level.upper())
    if any(getattr(h, "_salon_handler", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    handler._salon_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
