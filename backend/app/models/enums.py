from __future__ import annotations

from enum import Enum


class PostCategory(str, Enum):
    """Categories a post can be filed under."""

    GENERAL = "general"
    ANNOUNCEMENT = "announcement"
    QUESTION = "question"


class NotificationType(str, Enum):
    """Engagement events that produce a notification."""

    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
