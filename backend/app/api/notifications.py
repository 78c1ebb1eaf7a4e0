"""Notification inbox endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.config import get_settings
from app.database import get_db
from app.models import User
from app.schemas import MarkReadResult, NotificationPage, NotificationRead
from app.services import notifications

router = APIRouter(prefix="/notifications", tags=["notifications"])

settings = get_settings()


@router.get("", response_model=NotificationPage)
def list_notifications(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationPage:
    """Return the caller's notifications, newest first, with the unread total."""

    result = notifications.list_notifications(
        db, current_user, page=page, page_size=settings.notifications_page_size
    )
    return NotificationPage(
        notifications=[NotificationRead.model_validate(item) for item in result.items],
        page=result.page,
        limit=result.limit,
        has_more=result.has_more,
        unread_count=notifications.unread_count(db, current_user),
    )


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationRead:
    notification = notifications.mark_read(db, current_user, notification_id)
    return NotificationRead.model_validate(notification)


@router.patch("", response_model=MarkReadResult)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MarkReadResult:
    updated = notifications.mark_all_read(db, current_user)
    return MarkReadResult(message="All notifications marked as read", updated=updated)
