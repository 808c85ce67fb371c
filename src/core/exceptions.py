"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400 / 422)
    INVALID_INPUT = "INVALID_INPUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    PROFILE_ALREADY_EXISTS = "PROFILE_ALREADY_EXISTS"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Deadline (504)
    DEADLINE_EXCEEDED = "DEADLINE_EXCEEDED"

    # Server errors (500)
    LOOKUP_FAILED = "LOOKUP_FAILED"
    WRITE_FAILED = "WRITE_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message="profile not found",
            status_code=404,
            details={"user_id": user_id},
        )


class ProfileAlreadyExistsError(AppException):
    """A profile already exists for this subject identifier."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_ALREADY_EXISTS,
            message="profile already exists",
            status_code=409,
            details={"user_id": user_id},
        )


class InvalidInputError(AppException):
    """Request failed field validation."""

    def __init__(self, violations: dict[str, str]) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_INPUT,
            message="invalid data",
            status_code=400,
            details=violations,
        )
        self.violations = violations


class LookupFailedError(AppException):
    """The persistent store failed while reading.

    The underlying fault is chained as ``__cause__`` and only ever logged.
    """

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.LOOKUP_FAILED,
            message=INTERNAL_ERROR_MESSAGE,
            status_code=500,
        )
        self.user_id = user_id


class WriteFailedError(AppException):
    """The persistent store failed while writing."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.WRITE_FAILED,
            message=INTERNAL_ERROR_MESSAGE,
            status_code=500,
        )
        self.user_id = user_id


class StoreError(Exception):
    """Raised by the persistent store adapter for any database fault."""


class CacheError(Exception):
    """Raised by the cache adapter for any cache fault, including bad payloads."""
