"""UserProfile API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import (
    DeleteProfileResponse,
    ProfileBatchRequest,
    ProfileCreate,
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpdate,
)
from core.rate_limit import limiter
from domain.entities.profile import CreateProfileRequest, UpdateProfileRequest
from domain.services.user_profile_service import UserProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/{user_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile",
    responses={
        200: {"description": "Profile found"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user_id: str,
    service: UserProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the profile for a subject identifier."""
    profile = await service.get(user_id)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.post(
    "",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a profile",
    responses={
        201: {"description": "Profile created successfully"},
        400: {"description": "Invalid field values"},
        409: {"description": "Profile already exists for this user"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_profile(
    request: Request,
    body: ProfileCreate,
    service: UserProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Create a profile. One profile per subject identifier."""
    profile = await service.create(CreateProfileRequest(**body.model_dump()))
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.post(
    "/batch",
    response_model=ProfileListResponse,
    summary="Get several profiles",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def batch_get_profiles(
    request: Request,
    body: ProfileBatchRequest,
    service: UserProfileService = Depends(get_profile_service),
) -> ProfileListResponse:
    """Get the profiles that exist among ``user_ids``. Unknown ids are omitted."""
    profiles = await service.get_many(body.user_ids)
    return ProfileListResponse(data=[ProfileResponse.from_entity(p) for p in profiles])


@router.patch(
    "/{user_id}",
    response_model=ProfileDetailResponse,
    summary="Update a profile",
    responses={
        200: {"description": "Profile updated successfully"},
        400: {"description": "Invalid field values"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    user_id: str,
    body: ProfileUpdate,
    service: UserProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Update the supplied fields of a profile; the rest stay as they are."""
    profile = await service.update(
        user_id, UpdateProfileRequest(user_id=user_id, **body.model_dump())
    )
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.delete(
    "/{user_id}",
    response_model=DeleteProfileResponse,
    summary="Delete a profile",
    responses={
        200: {"description": "Profile deleted successfully"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_profile(
    request: Request,
    user_id: str,
    service: UserProfileService = Depends(get_profile_service),
) -> DeleteProfileResponse:
    """Delete a profile and evict it from the cache."""
    await service.delete(user_id)
    return DeleteProfileResponse(success=True)
