"""Domain-level exceptions raised by the social services."""

from __future__ import annotations

from fastapi import status


class SocialError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Request could not be processed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class Unauthorized(SocialError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized"


class Forbidden(SocialError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class NotFound(SocialError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class Conflict(SocialError):
    """A uniqueness rule was violated (duplicate like, follow or username)."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Already exists"


class InvalidOperation(SocialError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Operation not allowed"


class ValidationFailed(SocialError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation error"


class InternalError(SocialError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"
