from fastapi import APIRouter, Depends, HTTPException

from backend.app.core import redis_client as redis_module
from backend.app.core.config import settings
from backend.app.core.errors import StorageError
from backend.app.deps import Components, get_components
from backend.app.store.base import bounded


router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, bool]:
    """Basic liveness probe."""
    return {"ok": True}


@router.get("/readiness")
async def readiness(components: Components = Depends(get_components)) -> dict[str, bool]:
    """Ensure the booking store and, when configured, Redis are reachable."""
    try:
        await bounded(components.store.ping(), timeout=settings.STORE_TIMEOUT_SECONDS, operation="ping")
    except StorageError as exc:
        raise HTTPException(status_code=503, detail="Store unavailable") from exc

    if settings.REDIS_URL:
        if redis_module.redis_client is None:
            raise HTTPException(status_code=503, detail="Redis unavailable")
        try:
            await redis_module.redis_client.ping()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise HTTPException(status_code=503, detail="Redis unavailable") from exc

    return {"ready": True}
