"""Schemas for the notification inbox."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import NotificationType
from app.schemas.users import PublicUser


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: NotificationType
    message: str
    related_user_id: int | None = None
    related_post_id: int | None = None
    is_read: bool
    created_at: datetime
    related_user: PublicUser | None = None


class NotificationPage(BaseModel):
    notifications: list[NotificationRead] = Field(default_factory=list)
    page: int
    limit: int
    has_more: bool
    unread_count: int


class MarkReadResult(BaseModel):
    message: str
    updated: int
