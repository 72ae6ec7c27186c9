import hmac

from fastapi import Header, HTTPException, status

from backend.app.core.config import settings


async def require_staff(x_staff_token: str | None = Header(default=None)) -> None:
    """Gate staff-only routes on the shared X-Staff-Token header."""
    expected = settings.STAFF_API_TOKEN
    if not expected:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail="Staff access is not configured")
    if not x_staff_token or not hmac.compare_digest(x_staff_token, expected):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Invalid staff token")
