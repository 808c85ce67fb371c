"""Shared fixtures for unit tests."""

from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.profile import UserProfile


class FakeUnitOfWork:
    """Fake Unit of Work with a profile repository mock for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_profile(user_id: str = "user-1", **overrides: Any) -> UserProfile:
    """Build a stored-looking profile."""
    values: dict[str, Any] = {
        "user_id": user_id,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "phone": "+12025550123",
        "date_of_birth": "1990-12-10",
        "created_at": datetime(2026, 1, 1, 12, 0, 0),
        "updated_at": datetime(2026, 1, 1, 12, 0, 0),
    }
    values.update(overrides)
    return UserProfile(**values)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def cache() -> AsyncMock:
    """Profile cache mock that misses by default."""
    cache = AsyncMock()
    cache.get.return_value = None
    return cache
