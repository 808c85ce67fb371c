"""SQLAlchemy implementation of UserProfile repository."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ProfileAlreadyExistsError, StoreError
from domain.entities.profile import UserProfile
from infrastructure.database.models import UserProfileModel


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Re-raise driver and SQLAlchemy faults as StoreError."""
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        raise StoreError(f"{operation} failed: {e}") from e


class SQLAlchemyUserProfileRepository:
    """SQLAlchemy implementation of IUserProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> UserProfile | None:
        """Get a profile by internal ID."""
        stmt = select(UserProfileModel).where(UserProfileModel.id == id)
        with translate_store_errors("get profile by id"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user_id(self, user_id: str) -> UserProfile | None:
        """Get a profile by subject identifier."""
        stmt = select(UserProfileModel).where(UserProfileModel.user_id == user_id)
        with translate_store_errors("get profile by user id"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: UserProfile) -> UserProfile:
        """Insert a new profile. The model assigns id and both timestamps."""
        model = UserProfileModel(
            user_id=profile.user_id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            phone=profile.phone,
            date_of_birth=_to_date(profile.date_of_birth),
            avatar_url=profile.avatar_url,
            address=profile.address,
            city=profile.city,
            country=profile.country,
            postal_code=profile.postal_code,
            driving_license=profile.driving_license,
        )
        try:
            self._session.add(model)
            await self._session.flush()
        except IntegrityError as e:
            # user_id is the only unique column besides the generated key.
            raise ProfileAlreadyExistsError(profile.user_id) from e
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"create profile failed: {e}") from e

        with translate_store_errors("refresh created profile"):
            await self._session.refresh(model)
        return self._to_entity(model)

    async def update_by_user_id(
        self, user_id: str, changes: dict[str, str]
    ) -> UserProfile | None:
        """Apply a merge-patch under a row lock and refresh updated_at."""
        stmt = (
            select(UserProfileModel)
            .where(UserProfileModel.user_id == user_id)
            .with_for_update()
        )
        with translate_store_errors("update profile"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if not model:
                return None

            for name, value in changes.items():
                if name == "date_of_birth":
                    model.date_of_birth = _to_date(value)
                else:
                    setattr(model, name, value)
            model.updated_at = datetime.utcnow()

            await self._session.flush()
        return self._to_entity(model)

    async def delete_by_user_id(self, user_id: str) -> bool:
        """Delete a profile by subject identifier."""
        stmt = select(UserProfileModel).where(UserProfileModel.user_id == user_id)
        with translate_store_errors("delete profile"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if not model:
                return False

            await self._session.delete(model)
            await self._session.flush()
        return True

    def _to_entity(self, model: UserProfileModel) -> UserProfile:
        """Convert ORM model to domain entity."""
        return UserProfile(
            id=model.id,
            user_id=model.user_id,
            first_name=model.first_name,
            last_name=model.last_name,
            phone=model.phone,
            date_of_birth=model.date_of_birth.isoformat() if model.date_of_birth else None,
            avatar_url=model.avatar_url,
            address=model.address,
            city=model.city,
            country=model.country,
            postal_code=model.postal_code,
            driving_license=model.driving_license,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


def _to_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None
