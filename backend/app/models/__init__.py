"""Database models package."""

from .base import Base
from .enums import NotificationType, PostCategory
from .social import Comment, Follow, Like, Notification, Post, User

__all__ = [
    "Base",
    "User",
    "Post",
    "Comment",
    "Like",
    "Follow",
    "Notification",
    "NotificationType",
    "PostCategory",
]
