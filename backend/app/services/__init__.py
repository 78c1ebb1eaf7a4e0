"""Application services.

Each module receives the request's SQLAlchemy session explicitly; none of
them keeps state between calls.
"""

from .errors import (
    Conflict,
    Forbidden,
    InternalError,
    InvalidOperation,
    NotFound,
    SocialError,
    Unauthorized,
    ValidationFailed,
)
from .pagination import Page, paginate
from .sessions import get_session_store

__all__ = [
    "Conflict",
    "Forbidden",
    "InternalError",
    "InvalidOperation",
    "NotFound",
    "SocialError",
    "Unauthorized",
    "ValidationFailed",
    "Page",
    "paginate",
    "get_session_store",
]
