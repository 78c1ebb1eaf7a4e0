"""Notification fan-out and inbox management."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Notification, NotificationType, User
from app.monitoring.metrics import notifications_emitted_total, notifications_failed_total
from app.services.errors import NotFound
from app.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

_MESSAGES: dict[NotificationType, str] = {
    NotificationType.LIKE: "{actor} liked your post",
    NotificationType.COMMENT: "{actor} commented on your post",
    NotificationType.FOLLOW: "{actor} started following you",
}


def describe(kind: NotificationType, actor_username: str) -> str:
    """Return the display text stored with a notification."""

    return _MESSAGES[kind].format(actor=actor_username)


def notify(
    db: Session,
    *,
    target_user_id: int,
    kind: NotificationType,
    actor_user_id: int,
    message: str,
    related_post_id: int | None = None,
) -> Notification | None:
    """Write a notification for ``target_user_id``.

    Must be called after the triggering mutation has been committed. Self
    notifications are skipped. Storage failures are logged and swallowed so
    the caller's mutation still counts as succeeded.
    """

    if target_user_id == actor_user_id:
        return None

    try:
        notification = Notification(
            user_id=target_user_id,
            type=kind,
            message=message,
            related_user_id=actor_user_id,
            related_post_id=related_post_id,
        )
        db.add(notification)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        notifications_failed_total.inc(type=kind.value)
        logger.exception(
            "Failed to write %s notification for user %s (actor %s)",
            kind.value,
            target_user_id,
            actor_user_id,
        )
        return None

    notifications_emitted_total.inc(type=kind.value)
    logger.debug("Notified user %s: %s", target_user_id, message)
    return notification


def list_notifications(db: Session, user: User, *, page: int, page_size: int) -> Page[Notification]:
    stmt = (
        select(Notification)
        .where(Notification.user_id == user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return paginate(db, stmt, page=page, page_size=page_size)


def unread_count(db: Session, user: User) -> int:
    stmt = select(func.count(Notification.id)).where(
        Notification.user_id == user.id,
        Notification.is_read.is_(False),
    )
    return int(db.execute(stmt).scalar_one())


def mark_read(db: Session, user: User, notification_id: int) -> Notification:
    """Mark one of the caller's notifications as read. Repeating the call is harmless."""

    notification = db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user.id,
        )
    ).scalar_one_or_none()
    if notification is None:
        raise NotFound("Notification not found")
    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user: User) -> int:
    """Mark every unread notification of ``user`` as read and return how many changed."""

    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user.id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount or 0
