import redis.asyncio as redis

from backend.app.core.config import settings


redis_client: redis.Redis | None = None


async def init_redis() -> None:
    """Initialise a shared Redis connection when REDIS_URL is configured."""
    global redis_client
    if not settings.REDIS_URL:
        redis_client = None
        return
    redis_client = redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.NOTIFY_TIMEOUT_SECONDS,
        socket_connect_timeout=settings.NOTIFY_TIMEOUT_SECONDS,
    )


async def close_redis() -> None:
    """Close the Redis connection if it was initialised."""
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None
