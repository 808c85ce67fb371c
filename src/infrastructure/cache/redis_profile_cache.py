"""Redis implementation of the profile cache."""

from datetime import timedelta

import orjson
from redis.asyncio import Redis
from redis.exceptions import RedisError

from core.exceptions import CacheError
from domain.entities.profile import UserProfile

KEY_PREFIX = "user_profile:"


def cache_key(user_id: str) -> str:
    """Redis key for a subject identifier."""
    return f"{KEY_PREFIX}{user_id}"


class RedisProfileCache:
    """Redis implementation of IProfileCache.

    Profiles are stored as orjson-encoded snapshots with a fixed TTL.
    """

    def __init__(self, client: Redis, ttl: timedelta) -> None:
        self._client = client
        self._ttl = ttl

    async def get(self, user_id: str) -> UserProfile | None:
        """Get a cached profile; None on a miss."""
        try:
            raw = await self._client.get(cache_key(user_id))
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to get cached profile: {e}") from e

        if raw is None:
            return None

        try:
            return UserProfile.from_dict(orjson.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            raise CacheError(f"failed to decode cached profile: {e}") from e

    async def set(self, profile: UserProfile) -> None:
        """Cache a profile."""
        try:
            await self._client.set(
                cache_key(profile.user_id), orjson.dumps(profile), ex=self._expiry()
            )
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to cache profile: {e}") from e

    async def set_many(self, profiles: list[UserProfile]) -> None:
        """Cache several profiles in a single pipelined round trip."""
        if not profiles:
            return
        try:
            async with self._client.pipeline(transaction=False) as pipe:
                for profile in profiles:
                    pipe.set(
                        cache_key(profile.user_id),
                        orjson.dumps(profile),
                        ex=self._expiry(),
                    )
                await pipe.execute()
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to cache profile list: {e}") from e

    async def delete(self, user_id: str) -> None:
        """Evict a cached profile."""
        try:
            await self._client.delete(cache_key(user_id))
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to delete cached profile: {e}") from e

    async def ping(self) -> bool:
        """Check connectivity."""
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to ping cache: {e}") from e

    def _expiry(self) -> timedelta | None:
        # Redis rejects a zero expiry; treat it as "no expiry".
        return self._ttl if self._ttl > timedelta(0) else None
