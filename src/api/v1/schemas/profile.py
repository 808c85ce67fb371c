"""Pydantic schemas for UserProfile API.

Request fields default to empty strings: field rules (required, phone,
date) are enforced by the domain validator so that violations come back as
a field -> message map with status 400.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import UserProfile


class ProfileCreate(BaseModel):
    """Schema for creating a UserProfile."""

    user_id: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    date_of_birth: str = ""


class ProfileUpdate(BaseModel):
    """Schema for updating a UserProfile. Omitted or empty fields are left unchanged."""

    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    date_of_birth: str = ""
    avatar_url: str = ""
    address: str = ""
    city: str = ""
    country: str = ""
    postal_code: str = ""
    driving_license: str = ""


class ProfileBatchRequest(BaseModel):
    """Schema for reading several profiles at once."""

    user_ids: list[str] = Field(..., max_length=100)


class ProfileResponse(BaseModel):
    """Schema for UserProfile response.

    Address, city, country, postal code and driving license are stored but
    not part of the response payload.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "9b2f6a4e-1c3d-4e5f-8a7b-0c1d2e3f4a5b",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "phone": "+12025550123",
                "date_of_birth": "1990-12-10",
                "avatar_url": "",
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    user_id: str
    first_name: str
    last_name: str
    phone: str = ""
    date_of_birth: str = ""
    avatar_url: str = ""
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: UserProfile) -> "ProfileResponse":
        return cls(
            user_id=profile.user_id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            phone=profile.phone or "",
            date_of_birth=profile.date_of_birth or "",
            avatar_url=profile.avatar_url or "",
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class ProfileDetailResponse(BaseModel):
    """Schema for single UserProfile."""

    data: ProfileResponse


class ProfileListResponse(BaseModel):
    """Schema for list of UserProfiles."""

    data: list[ProfileResponse]


class DeleteProfileResponse(BaseModel):
    """Schema for delete result."""

    success: bool
