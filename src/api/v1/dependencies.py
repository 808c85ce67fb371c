"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.user_profile_service import UserProfileService
from infrastructure.cache.redis_client import redis_client
from infrastructure.cache.redis_profile_cache import RedisProfileCache
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_profile_cache() -> RedisProfileCache:
    """Get the Redis-backed profile cache."""
    return RedisProfileCache(redis_client, ttl=settings.cache_ttl)


@lru_cache
def get_profile_service() -> UserProfileService:
    """Get UserProfile service instance."""
    return UserProfileService(get_uow_factory(), cache=get_profile_cache())
