"""User profile domain entity and request objects."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID, uuid4

# Fields a caller may change after creation. ``user_id`` and ``id`` never change.
MUTABLE_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "phone",
    "date_of_birth",
    "avatar_url",
    "address",
    "city",
    "country",
    "postal_code",
    "driving_license",
)


@dataclass
class UserProfile:
    """Domain entity for a user profile record."""

    user_id: str
    first_name: str
    last_name: str
    id: UUID = field(default_factory=uuid4)
    phone: str | None = None
    date_of_birth: str | None = None  # YYYY-MM-DD
    avatar_url: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    postal_code: str | None = None
    driving_license: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping of every field, used for the cache snapshot."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        """Rebuild a profile from :meth:`to_dict` output (JSON-decoded)."""
        return cls(
            id=UUID(str(data["id"])),
            user_id=data["user_id"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            phone=data.get("phone"),
            date_of_birth=data.get("date_of_birth"),
            avatar_url=data.get("avatar_url"),
            address=data.get("address"),
            city=data.get("city"),
            country=data.get("country"),
            postal_code=data.get("postal_code"),
            driving_license=data.get("driving_license"),
            created_at=_parse_datetime(data["created_at"]),
            updated_at=_parse_datetime(data["updated_at"]),
        )


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class CreateProfileRequest:
    """Fields accepted when creating a profile."""

    FIELD_RULES: ClassVar[dict[str, tuple[str, ...]]] = {
        "user_id": ("required",),
        "first_name": ("required",),
        "last_name": ("required",),
        "phone": ("phone",),
        "date_of_birth": ("date",),
    }

    user_id: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    date_of_birth: str = ""

    def to_profile(self) -> UserProfile:
        """Build the new entity; empty optional fields are stored as NULL."""
        return UserProfile(
            user_id=self.user_id,
            first_name=self.first_name,
            last_name=self.last_name,
            phone=self.phone or None,
            date_of_birth=self.date_of_birth or None,
        )


@dataclass
class UpdateProfileRequest:
    """Merge-patch: empty fields leave the stored value unchanged."""

    FIELD_RULES: ClassVar[dict[str, tuple[str, ...]]] = {
        "user_id": ("required",),
        "phone": ("phone",),
        "date_of_birth": ("date",),
    }

    user_id: str = ""
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

    def changes(self) -> dict[str, str]:
        """Only the fields the caller actually supplied."""
        return {name: getattr(self, name) for name in MUTABLE_FIELDS if getattr(self, name)}
