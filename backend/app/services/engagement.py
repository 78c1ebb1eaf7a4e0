"""Posts, likes and comments.

Every mutation keeps the stored counters (``posts_count``, ``like_count``,
``comment_count``) in the same transaction as the row it inserts or
deletes, using server-side increments. Notifications are written afterwards
and never affect the outcome of the mutation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Comment, Like, Notification, NotificationType, Post, User
from app.monitoring.metrics import social_actions_total, social_conflicts_total
from app.schemas.posts import COMMENT_MAX_LENGTH, PostCreate, PostUpdate
from app.services.errors import Conflict, Forbidden, NotFound, ValidationFailed
from app.services.notifications import describe, notify

logger = logging.getLogger(__name__)


def get_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


def create_post(db: Session, author: User, payload: PostCreate) -> Post:
    post = Post(
        user_id=author.id,
        content=payload.content,
        image_url=str(payload.image_url) if payload.image_url is not None else None,
        category=payload.category,
    )
    db.add(post)
    db.execute(
        update(User)
        .where(User.id == author.id)
        .values(posts_count=User.posts_count + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(post)
    social_actions_total.inc(action="post")
    logger.info("User %s created post %s", post.user_id, post.id)
    return post


def update_post(db: Session, actor: User, post_id: int, payload: PostUpdate) -> Post:
    """Apply a partial update. Only the author may edit a post."""

    post = get_post(db, post_id)
    if post.user_id != actor.id:
        raise Forbidden("You can only edit your own posts")

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationFailed("No valid updates provided")
    if "content" in changes and changes["content"] is None:
        raise ValidationFailed("Content cannot be empty")
    if "category" in changes and changes["category"] is None:
        raise ValidationFailed("Category cannot be empty")

    if "content" in changes:
        post.content = payload.content
    if "category" in changes:
        post.category = payload.category
    if "image_url" in changes:
        post.image_url = str(payload.image_url) if payload.image_url is not None else None
    post.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, actor: User, post_id: int) -> None:
    """Delete a post together with its comments, likes and notifications.

    Allowed for the author and for administrators.
    """

    post = get_post(db, post_id)
    if post.user_id != actor.id and not actor.is_admin:
        raise Forbidden("You can only delete your own posts")

    author_id = post.user_id
    db.execute(
        delete(Notification)
        .where(Notification.related_post_id == post_id)
        .execution_options(synchronize_session=False)
    )
    db.execute(delete(Like).where(Like.post_id == post_id).execution_options(synchronize_session=False))
    db.execute(delete(Comment).where(Comment.post_id == post_id).execution_options(synchronize_session=False))
    db.delete(post)
    db.execute(
        update(User)
        .where(User.id == author_id, User.posts_count > 0)
        .values(posts_count=User.posts_count - 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()

    social_actions_total.inc(action="delete_post")
    logger.info("Post %s of user %s deleted by user %s", post_id, author_id, actor.id)


def _like_exists(db: Session, user_id: int, post_id: int) -> bool:
    stmt = select(Like.id).where(Like.user_id == user_id, Like.post_id == post_id)
    return db.execute(stmt).scalar_one_or_none() is not None


def liked_post_ids(db: Session, user_id: int, post_ids: Iterable[int]) -> set[int]:
    """Subset of ``post_ids`` that ``user_id`` has liked."""

    ids = list(post_ids)
    if not ids:
        return set()
    stmt = select(Like.post_id).where(Like.user_id == user_id, Like.post_id.in_(ids))
    return set(db.execute(stmt).scalars().all())


def like(db: Session, user: User, post_id: int) -> Post:
    """Like a post once. The owner is notified unless they liked their own post."""

    post = get_post(db, post_id)
    if _like_exists(db, user.id, post.id):
        social_conflicts_total.inc(action="like")
        raise Conflict("Post already liked")

    liker_id = user.id
    liker_name = user.username
    owner_id = post.user_id

    try:
        db.add(Like(user_id=liker_id, post_id=post_id))
        db.flush()
        db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(like_count=Post.like_count + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        social_conflicts_total.inc(action="like")
        raise Conflict("Post already liked") from exc

    social_actions_total.inc(action="like")
    logger.info("User %s liked post %s", liker_id, post_id)

    if owner_id != liker_id:
        notify(
            db,
            target_user_id=owner_id,
            kind=NotificationType.LIKE,
            actor_user_id=liker_id,
            message=describe(NotificationType.LIKE, liker_name),
            related_post_id=post_id,
        )
    db.refresh(post)
    return post


def unlike(db: Session, user: User, post_id: int) -> Post:
    """Remove the caller's like if present.

    Notifications sent for the like are kept.
    """

    post = get_post(db, post_id)
    user_id = user.id
    result = db.execute(
        delete(Like)
        .where(Like.user_id == user_id, Like.post_id == post_id)
        .execution_options(synchronize_session=False)
    )
    removed = bool(result.rowcount)
    if removed:
        db.execute(
            update(Post)
            .where(Post.id == post_id, Post.like_count > 0)
            .values(like_count=Post.like_count - 1)
            .execution_options(synchronize_session=False)
        )
    db.commit()

    if removed:
        social_actions_total.inc(action="unlike")
        logger.info("User %s unliked post %s", user_id, post_id)
    db.refresh(post)
    return post


def add_comment(db: Session, user: User, post_id: int, content: str) -> Comment:
    """Comment on a post and notify its owner unless they commented themselves."""

    text = (content or "").strip()
    if not 1 <= len(text) <= COMMENT_MAX_LENGTH:
        raise ValidationFailed(f"Comment must be between 1 and {COMMENT_MAX_LENGTH} characters")

    post = get_post(db, post_id)
    commenter_id = user.id
    commenter_name = user.username
    owner_id = post.user_id

    comment = Comment(post_id=post_id, user_id=commenter_id, content=text)
    db.add(comment)
    db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(comment_count=Post.comment_count + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(comment)

    social_actions_total.inc(action="comment")
    logger.info("User %s commented on post %s", commenter_id, post_id)

    if owner_id != commenter_id:
        notify(
            db,
            target_user_id=owner_id,
            kind=NotificationType.COMMENT,
            actor_user_id=commenter_id,
            message=describe(NotificationType.COMMENT, commenter_name),
            related_post_id=post_id,
        )
    return comment


def list_comments(db: Session, post_id: int) -> list[Comment]:
    """Comments on a post, oldest first."""

    get_post(db, post_id)
    stmt = (
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    return list(db.execute(stmt).unique().scalars().all())
