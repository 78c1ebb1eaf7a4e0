"""Read-only post listings: the global timeline and the personalized feed."""

from __future__ import annotations

from sqlalchemy import Select, or_, select
from sqlalchemy.orm import Session

from app.models import Follow, Post, User
from app.services.pagination import Page, paginate


def _newest_first(stmt: Select) -> Select:
    return stmt.order_by(Post.created_at.desc(), Post.id.desc())


def global_feed(db: Session, *, page: int, page_size: int) -> Page[Post]:
    """All posts, newest first."""

    return paginate(db, _newest_first(select(Post)), page=page, page_size=page_size)


def personal_feed(db: Session, user: User, *, page: int, page_size: int) -> Page[Post]:
    """Posts written by ``user`` or by anyone ``user`` follows, newest first."""

    followed = select(Follow.following_id).where(Follow.follower_id == user.id)
    stmt = select(Post).where(or_(Post.user_id == user.id, Post.user_id.in_(followed)))
    return paginate(db, _newest_first(stmt), page=page, page_size=page_size)


def user_posts(db: Session, user_id: int, *, page: int, page_size: int) -> Page[Post]:
    """Posts written by one user, newest first."""

    stmt = select(Post).where(Post.user_id == user_id)
    return paginate(db, _newest_first(stmt), page=page, page_size=page_size)
