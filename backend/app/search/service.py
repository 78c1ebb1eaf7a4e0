"""Database-backed search helpers for user profiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from app.models import User


@dataclass(frozen=True)
class UserSearchFilters:
    """Optional filters applied on top of the text match."""

    exclude_ids: frozenset[int] = field(default_factory=frozenset)
    active_only: bool = True


class UserSearchService:
    """Find users by username or bio, most followed first."""

    def __init__(self, session: Session):
        self._session = session

    def search(self, query: str, *, limit: int, filters: UserSearchFilters | None = None) -> list[User]:
        """Case-insensitive substring search. Blank queries return nothing."""

        query = query.strip()
        if not query:
            return []
        return self._run(self._build_matcher(query), limit=limit, filters=filters or UserSearchFilters())

    def suggest(self, *, limit: int, filters: UserSearchFilters | None = None) -> list[User]:
        """Most followed users matching ``filters`` without any text condition."""

        return self._run(None, limit=limit, filters=filters or UserSearchFilters())

    # Internal helpers -----------------------------------------------------

    def _run(self, matcher, *, limit: int, filters: UserSearchFilters) -> list[User]:
        conditions: list = []
        if matcher is not None:
            conditions.append(matcher)
        if filters.exclude_ids:
            conditions.append(User.id.not_in(sorted(filters.exclude_ids)))
        if filters.active_only:
            conditions.append(User.is_active.is_(True))

        stmt = select(User)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(User.followers_count.desc(), User.id.asc()).limit(limit)
        rows: Iterable[User] = self._session.execute(stmt).scalars().all()
        return list(rows)

    def _build_matcher(self, query: str):
        pattern = f"%{self._escape_like(query)}%"
        return or_(User.username.ilike(pattern, escape="\\"), User.bio.ilike(pattern, escape="\\"))

    @staticmethod
    def _escape_like(value: str) -> str:
        return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
