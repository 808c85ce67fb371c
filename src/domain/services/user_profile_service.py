"""User profile service: cache-aside coordination over store and cache.

The store is the single source of truth. The cache is a disposable
performance optimisation: every cache call is best-effort, its failures are
logged and never reach the caller, and it is never consulted for
correctness decisions such as the existence check before an insert.

Store and cache are not updated atomically. If the cache write after a
successful store write fails, the cache is stale or empty until the entry
expires or the next read repopulates it.

``asyncio.CancelledError`` is never caught here: a cancelled request aborts
its in-flight store or cache call and propagates the cancellation.
"""

from collections.abc import Callable

import structlog

from core.exceptions import (
    CacheError,
    InvalidInputError,
    LookupFailedError,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    StoreError,
    WriteFailedError,
)
from core.validation import validate
from domain.entities.profile import (
    CreateProfileRequest,
    UpdateProfileRequest,
    UserProfile,
)
from domain.repositories.profile_cache import IProfileCache
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class UserProfileService:
    """Service layer for UserProfile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cache: IProfileCache,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    async def get(self, user_id: str) -> UserProfile:
        """Get a profile, serving from cache when possible."""
        logger.debug("profile_get", user_id=user_id)

        cached = await self._cache_get(user_id)
        if cached is not None:
            logger.debug("profile_cache_hit", user_id=user_id)
            return cached

        async with self._uow_factory() as uow:
            profile = await self._lookup(uow, user_id)

        if profile is None:
            logger.debug("profile_not_found", user_id=user_id)
            raise ProfileNotFoundError(user_id)

        await self._cache_set(profile)
        logger.debug("profile_loaded_from_store", user_id=user_id)
        return profile

    async def create(self, request: CreateProfileRequest) -> UserProfile:
        """Create a profile. The unique constraint on user_id settles races."""
        logger.debug("profile_create", user_id=request.user_id)
        self._validate(request)

        async with self._uow_factory() as uow:
            existing = await self._lookup(uow, request.user_id)
            if existing is not None:
                logger.warning("profile_already_exists", user_id=request.user_id)
                raise ProfileAlreadyExistsError(request.user_id)

            try:
                created = await uow.profiles.create(request.to_profile())
                await uow.commit()
            except ProfileAlreadyExistsError:
                # Lost the race against a concurrent create for the same user_id.
                logger.warning("profile_create_conflict", user_id=request.user_id)
                raise
            except StoreError as e:
                logger.error(
                    "profile_create_failed", user_id=request.user_id, error=str(e)
                )
                raise WriteFailedError(request.user_id) from e

        await self._cache_set(created)
        logger.info("profile_created", user_id=created.user_id, profile_id=str(created.id))
        return created

    async def update(self, user_id: str, request: UpdateProfileRequest) -> UserProfile:
        """Merge-patch a profile: only non-empty request fields are applied."""
        logger.debug("profile_update", user_id=user_id)
        self._validate(request)

        async with self._uow_factory() as uow:
            existing = await self._lookup(uow, user_id)
            if existing is None:
                logger.warning("profile_not_found_for_update", user_id=user_id)
                raise ProfileNotFoundError(user_id)

            try:
                updated = await uow.profiles.update_by_user_id(user_id, request.changes())
                if updated is not None:
                    await uow.commit()
            except StoreError as e:
                logger.error("profile_update_failed", user_id=user_id, error=str(e))
                raise WriteFailedError(user_id) from e

        if updated is None:
            # Deleted between the lookup and the update.
            logger.warning("profile_vanished_during_update", user_id=user_id)
            raise ProfileNotFoundError(user_id)

        await self._cache_set(updated)
        logger.info("profile_updated", user_id=user_id, profile_id=str(updated.id))
        return updated

    async def delete(self, user_id: str) -> None:
        """Delete a profile from the store, then evict it from the cache."""
        logger.debug("profile_delete", user_id=user_id)

        async with self._uow_factory() as uow:
            existing = await self._lookup(uow, user_id)
            if existing is None:
                logger.warning("profile_not_found_for_delete", user_id=user_id)
                raise ProfileNotFoundError(user_id)

            try:
                deleted = await uow.profiles.delete_by_user_id(user_id)
                if deleted:
                    await uow.commit()
            except StoreError as e:
                logger.error("profile_delete_failed", user_id=user_id, error=str(e))
                raise WriteFailedError(user_id) from e

        if not deleted:
            raise ProfileNotFoundError(user_id)

        try:
            await self._cache.delete(user_id)
        except CacheError as e:
            logger.warning("profile_cache_evict_failed", user_id=user_id, error=str(e))

        logger.info("profile_deleted", user_id=user_id)

    async def get_many(self, user_ids: list[str]) -> list[UserProfile]:
        """Batch read with partial-success semantics.

        Unknown ids and ids whose store lookup fails are left out of the
        result rather than failing the batch. Cache hits come first, then
        store hits; input order is not preserved.
        """
        logger.debug("profile_get_many", count=len(user_ids))

        hits: list[UserProfile] = []
        misses: list[str] = []
        for user_id in user_ids:
            cached = await self._cache_get(user_id)
            if cached is not None:
                hits.append(cached)
            else:
                misses.append(user_id)

        if not misses:
            return hits

        fetched: list[UserProfile] = []
        async with self._uow_factory() as uow:
            for user_id in misses:
                try:
                    profile = await uow.profiles.get_by_user_id(user_id)
                except StoreError as e:
                    logger.error(
                        "profile_batch_lookup_failed", user_id=user_id, error=str(e)
                    )
                    # A failed statement can poison the transaction for the rest.
                    try:
                        await uow.rollback()
                    except StoreError as rollback_error:
                        logger.error(
                            "profile_batch_rollback_failed",
                            user_id=user_id,
                            error=str(rollback_error),
                        )
                    continue
                if profile is not None:
                    fetched.append(profile)

        if fetched:
            try:
                await self._cache.set_many(fetched)
            except CacheError as e:
                logger.warning(
                    "profile_cache_batch_write_failed", count=len(fetched), error=str(e)
                )

        return hits + fetched

    def _validate(self, request: CreateProfileRequest | UpdateProfileRequest) -> None:
        violations = validate(request)
        if violations:
            logger.warning(
                "profile_validation_failed", user_id=request.user_id, errors=violations
            )
            raise InvalidInputError(violations)

    async def _lookup(self, uow: IUnitOfWork, user_id: str) -> UserProfile | None:
        try:
            return await uow.profiles.get_by_user_id(user_id)
        except StoreError as e:
            logger.error("profile_lookup_failed", user_id=user_id, error=str(e))
            raise LookupFailedError(user_id) from e

    async def _cache_get(self, user_id: str) -> UserProfile | None:
        """Cache errors count as a miss."""
        try:
            return await self._cache.get(user_id)
        except CacheError as e:
            logger.warning("profile_cache_read_failed", user_id=user_id, error=str(e))
            return None

    async def _cache_set(self, profile: UserProfile) -> None:
        try:
            await self._cache.set(profile)
        except CacheError as e:
            logger.warning(
                "profile_cache_write_failed", user_id=profile.user_id, error=str(e)
            )
