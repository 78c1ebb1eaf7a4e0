"""Follow graph mutations and listings."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.models import Follow, NotificationType, User
from app.monitoring.metrics import social_actions_total, social_conflicts_total
from app.services.errors import Conflict, InvalidOperation, NotFound
from app.services.notifications import describe, notify

logger = logging.getLogger(__name__)


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _edge_exists(db: Session, follower_id: int, following_id: int) -> bool:
    stmt = select(Follow.id).where(
        Follow.follower_id == follower_id,
        Follow.following_id == following_id,
    )
    return db.execute(stmt).scalar_one_or_none() is not None


def is_following(db: Session, follower_id: int, following_id: int) -> bool:
    return _edge_exists(db, follower_id, following_id)


def following_ids(db: Session, follower_id: int, candidates: Iterable[int] | None = None) -> set[int]:
    """Return the ids ``follower_id`` follows, optionally restricted to ``candidates``."""

    stmt = select(Follow.following_id).where(Follow.follower_id == follower_id)
    if candidates is not None:
        candidate_ids = list(candidates)
        if not candidate_ids:
            return set()
        stmt = stmt.where(Follow.following_id.in_(candidate_ids))
    return set(db.execute(stmt).scalars().all())


def follow(db: Session, follower: User, target_id: int) -> User:
    """Create the ``follower -> target`` edge and notify the target.

    The edge insert and both counter increments share one transaction.
    Returns the refreshed target user.
    """

    if follower.id == target_id:
        raise InvalidOperation("Cannot follow yourself")
    target = _get_user(db, target_id)
    if _edge_exists(db, follower.id, target.id):
        social_conflicts_total.inc(action="follow")
        raise Conflict("Already following this user")

    follower_id = follower.id
    follower_name = follower.username

    # flushed first: the unique constraint settles concurrent follows
    try:
        db.add(Follow(follower_id=follower_id, following_id=target_id))
        db.flush()
        db.execute(
            update(User)
            .where(User.id == target_id)
            .values(followers_count=User.followers_count + 1)
            .execution_options(synchronize_session=False)
        )
        db.execute(
            update(User)
            .where(User.id == follower_id)
            .values(following_count=User.following_count + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        social_conflicts_total.inc(action="follow")
        raise Conflict("Already following this user") from exc

    social_actions_total.inc(action="follow")
    logger.info("User %s followed user %s", follower_id, target_id)

    notify(
        db,
        target_user_id=target_id,
        kind=NotificationType.FOLLOW,
        actor_user_id=follower_id,
        message=describe(NotificationType.FOLLOW, follower_name),
    )
    db.refresh(target)
    return target


def unfollow(db: Session, follower: User, target_id: int) -> bool:
    """Remove the edge if present. Returns whether an edge was deleted."""

    follower_id = follower.id
    result = db.execute(
        delete(Follow)
        .where(Follow.follower_id == follower_id, Follow.following_id == target_id)
        .execution_options(synchronize_session=False)
    )
    removed = bool(result.rowcount)
    if removed:
        db.execute(
            update(User)
            .where(User.id == target_id, User.followers_count > 0)
            .values(followers_count=User.followers_count - 1)
            .execution_options(synchronize_session=False)
        )
        db.execute(
            update(User)
            .where(User.id == follower_id, User.following_count > 0)
            .values(following_count=User.following_count - 1)
            .execution_options(synchronize_session=False)
        )
    db.commit()

    if removed:
        social_actions_total.inc(action="unfollow")
        logger.info("User %s unfollowed user %s", follower_id, target_id)
    return removed


def list_followers(db: Session, user_id: int) -> list[tuple[User, Follow]]:
    """Users following ``user_id``, most recent edge first."""

    _get_user(db, user_id)
    stmt = (
        select(Follow)
        .options(joinedload(Follow.follower))
        .where(Follow.following_id == user_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
    )
    return [(edge.follower, edge) for edge in db.execute(stmt).scalars().all()]


def list_following(db: Session, user_id: int) -> list[tuple[User, Follow]]:
    """Users ``user_id`` follows, most recent edge first."""

    _get_user(db, user_id)
    stmt = (
        select(Follow)
        .options(joinedload(Follow.following))
        .where(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
    )
    return [(edge.following, edge) for edge in db.execute(stmt).scalars().all()]
