"""Redis client construction."""

from redis.asyncio import Redis

from core.config import settings

# Shared client; redis-py manages its own connection pool and connects lazily.
redis_client: Redis = Redis.from_url(
    settings.redis_url,
    socket_connect_timeout=settings.cache_timeout_seconds,
    socket_timeout=settings.cache_timeout_seconds,
)
