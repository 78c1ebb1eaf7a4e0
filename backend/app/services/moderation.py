"""Admin-only statistics and account moderation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from app.core.security import revoke_user_sessions
from app.models import Comment, Follow, Like, Post, User
from app.services.errors import InvalidOperation, NotFound
from app.services.pagination import Page, paginate

logger = logging.getLogger(__name__)


def _count(db: Session, column, *conditions) -> int:
    stmt = select(func.count(column))
    if conditions:
        stmt = stmt.where(*conditions)
    return int(db.execute(stmt).scalar_one())


def collect_stats(db: Session, *, recent_limit: int) -> dict[str, object]:
    now = datetime.now(timezone.utc)
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

    recent_users = db.execute(
        select(User).order_by(User.created_at.desc(), User.id.desc()).limit(recent_limit)
    ).scalars().all()
    recent_posts = db.execute(
        select(Post).order_by(Post.created_at.desc(), Post.id.desc()).limit(recent_limit)
    ).unique().scalars().all()

    return {
        "total_users": _count(db, User.id),
        "active_users": _count(db, User.id, User.is_active.is_(True)),
        "users_active_today": _count(db, distinct(Post.user_id), Post.created_at >= start_of_day),
        "total_posts": _count(db, Post.id),
        "posts_today": _count(db, Post.id, Post.created_at >= start_of_day),
        "total_likes": _count(db, Like.id),
        "total_comments": _count(db, Comment.id),
        "total_follows": _count(db, Follow.id),
        "recent_users": list(recent_users),
        "recent_posts": list(recent_posts),
        "timestamp": now,
    }


def list_users(db: Session, *, page: int, page_size: int) -> Page[User]:
    stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
    return paginate(db, stmt, page=page, page_size=page_size)


def list_posts(db: Session, *, page: int, page_size: int) -> Page[Post]:
    stmt = select(Post).order_by(Post.created_at.desc(), Post.id.desc())
    return paginate(db, stmt, page=page, page_size=page_size)


def toggle_active(db: Session, admin: User, user_id: int) -> User:
    """Flip ``is_active`` for a user. Admins cannot lock themselves out.

    Deactivation also ends every refresh session of the account.
    """

    if admin.id == user_id:
        raise InvalidOperation("You cannot deactivate your own account")
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    user.is_active = not user.is_active
    user.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    if not user.is_active:
        revoke_user_sessions(user.id)
    logger.info(
        "Admin %s %s user %s",
        admin.id,
        "activated" if user.is_active else "deactivated",
        user.id,
    )
    return user
