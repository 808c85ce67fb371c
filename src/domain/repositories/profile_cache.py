"""Profile cache protocol."""

from typing import Protocol

from domain.entities.profile import UserProfile


class IProfileCache(Protocol):
    """Best-effort profile cache keyed by subject identifier.

    A miss returns ``None``; any cache fault raises ``CacheError``.
    """

    async def get(self, user_id: str) -> UserProfile | None:
        """Get a cached profile."""
        ...

    async def set(self, profile: UserProfile) -> None:
        """Cache a profile with the configured TTL."""
        ...

    async def set_many(self, profiles: list[UserProfile]) -> None:
        """Cache several profiles in one round trip."""
        ...

    async def delete(self, user_id: str) -> None:
        """Evict a cached profile."""
        ...

    async def ping(self) -> bool:
        """Check cache connectivity."""
        ...
