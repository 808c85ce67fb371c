"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("APP_ENV", "test")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.exceptions import CacheError
from domain.entities.profile import UserProfile
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class InMemoryProfileCache:
    """Dict-backed IProfileCache double.

    Set ``available = False`` to make every call fail the way an unreachable
    Redis does.
    """

    def __init__(self) -> None:
        self.entries: dict[str, UserProfile] = {}
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise CacheError("cache unavailable")

    async def get(self, user_id: str) -> UserProfile | None:
        self._check()
        return self.entries.get(user_id)

    async def set(self, profile: UserProfile) -> None:
        self._check()
        self.entries[profile.user_id] = profile

    async def set_many(self, profiles: list[UserProfile]) -> None:
        self._check()
        for profile in profiles:
            self.entries[profile.user_id] = profile

    async def delete(self, user_id: str) -> None:
        self._check()
        self.entries.pop(user_id, None)

    async def ping(self) -> bool:
        self._check()
        return True


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def profile_cache() -> InMemoryProfileCache:
    """In-memory stand-in for the Redis cache."""
    return InMemoryProfileCache()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with production dependencies."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    profile_cache: InMemoryProfileCache,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the test database and in-memory cache.

    This client:
    - Uses an in-memory SQLite database
    - Overrides the profile service to use the test UoW factory and cache
    """
    from api.v1.dependencies import get_profile_service
    from domain.services.user_profile_service import UserProfileService
    from main import create_app

    app = create_app()

    def override_get_profile_service() -> UserProfileService:
        return UserProfileService(uow_factory, cache=profile_cache)

    app.dependency_overrides[get_profile_service] = override_get_profile_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
