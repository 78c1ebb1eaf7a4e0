"""Offset pagination shared by every listing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.services.errors import ValidationFailed

T = TypeVar("T")


@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    limit: int
    has_more: bool


def paginate(db: Session, stmt: Select, *, page: int, page_size: int) -> Page:
    """Run ``stmt`` for a 1-based ``page``.

    One row beyond the page is fetched so ``has_more`` is exact: a total that
    is a multiple of ``page_size`` reports ``False`` on its last full page.
    """

    if page < 1:
        raise ValidationFailed("Page must be a positive integer")
    offset = (page - 1) * page_size
    rows = db.execute(stmt.offset(offset).limit(page_size + 1)).unique().scalars().all()
    return Page(items=list(rows[:page_size]), page=page, limit=page_size, has_more=len(rows) > page_size)
