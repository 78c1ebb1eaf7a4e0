"""Accounts, profiles and user discovery."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import get_password_hash, verify_password
from app.models import User
from app.schemas.users import UserProfileUpdate
from app.search import UserSearchFilters, UserSearchService
from app.services.errors import Conflict, NotFound, Unauthorized
from app.services.graph import following_ids

logger = logging.getLogger(__name__)


def _username_taken(db: Session, username: str, *, exclude_id: int | None = None) -> bool:
    stmt = select(User.id).where(User.username == username)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return db.execute(stmt).scalar_one_or_none() is not None


def create_account(
    db: Session,
    *,
    email: str,
    username: str,
    password: str,
    is_admin: bool = False,
    bio: str | None = None,
) -> User:
    email = email.lower()
    if _username_taken(db, username):
        raise Conflict("Username already exists")
    if db.execute(select(User.id).where(User.email == email)).scalar_one_or_none() is not None:
        raise Conflict("Email is already registered")

    user = User(
        email=email,
        username=username,
        hashed_password=get_password_hash(password),
        is_admin=is_admin,
        bio=bio,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Username or email already exists") from exc
    db.refresh(user)
    logger.info("Registered %s %s (id=%s)", "admin" if is_admin else "user", user.username, user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Check credentials; inactive accounts cannot sign in."""

    user = db.execute(select(User).where(User.email == email.lower())).scalar_one_or_none()
    if user is None or not verify_password(password, user.hashed_password):
        raise Unauthorized("Incorrect email or password")
    if not user.is_active:
        raise Unauthorized("Account is deactivated")
    return user


def get_profile(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(db: Session, user: User, payload: UserProfileUpdate) -> User:
    changes = payload.model_dump(exclude_unset=True)
    username = changes.get("username")
    if username and username != user.username and _username_taken(db, username, exclude_id=user.id):
        raise Conflict("Username already exists")

    # username and is_private cannot be cleared; null means "leave as is"
    for key in ("username", "is_private"):
        if changes.get(key) is not None:
            setattr(user, key, changes[key])
    for key in ("bio", "location"):
        if key in changes:
            setattr(user, key, changes[key] or None)
    for key in ("website", "avatar_url"):
        if key in changes:
            value = getattr(payload, key)
            setattr(user, key, str(value) if value is not None else None)

    if changes:
        user.updated_at = datetime.now(timezone.utc)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise Conflict("Username already exists") from exc
        db.refresh(user)
    return user


def search_users(db: Session, query: str, *, viewer: User | None, limit: int) -> list[tuple[User, bool]]:
    """Users whose username or bio contains ``query``, with the viewer's follow state."""

    users = UserSearchService(db).search(query, limit=limit)
    if viewer is None:
        return [(user, False) for user in users]
    followed = following_ids(db, viewer.id, (user.id for user in users))
    return [(user, user.id in followed) for user in users]


def discover_users(db: Session, viewer: User, *, limit: int) -> list[User]:
    """Most followed active users the viewer does not follow yet."""

    excluded = frozenset({viewer.id, *following_ids(db, viewer.id)})
    return UserSearchService(db).suggest(limit=limit, filters=UserSearchFilters(exclude_ids=excluded))
