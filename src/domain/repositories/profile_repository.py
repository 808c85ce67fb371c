"""User profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import UserProfile


class IUserProfileRepository(Protocol):
    """Repository interface for UserProfile entities.

    Absence is reported as ``None``/``False``. Database faults raise
    ``StoreError``; a duplicate ``user_id`` on create raises
    ``ProfileAlreadyExistsError``.
    """

    async def get(self, id: UUID) -> UserProfile | None:
        """Get a profile by internal ID."""
        ...

    async def get_by_user_id(self, user_id: str) -> UserProfile | None:
        """Get a profile by subject identifier."""
        ...

    async def create(self, profile: UserProfile) -> UserProfile:
        """Insert a new profile."""
        ...

    async def update_by_user_id(
        self, user_id: str, changes: dict[str, str]
    ) -> UserProfile | None:
        """Apply a merge-patch and refresh updated_at. None if the row is gone."""
        ...

    async def delete_by_user_id(self, user_id: str) -> bool:
        """Delete a profile and return success status."""
        ...
