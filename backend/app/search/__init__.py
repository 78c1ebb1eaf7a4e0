"""Search service interfaces."""

from .service import UserSearchFilters, UserSearchService

__all__ = ["UserSearchFilters", "UserSearchService"]
