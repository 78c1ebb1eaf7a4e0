"""Pydantic schemas for API payloads."""

from .admin import ActivationResult, AdminStats, AdminUserPage
from .auth import AdminUserCreate, LoginRequest, RefreshRequest, Token, UserCreate
from .notifications import MarkReadResult, NotificationPage, NotificationRead
from .posts import (
    CommentCreate,
    CommentList,
    CommentRead,
    LikeState,
    PostCreate,
    PostPage,
    PostRead,
    PostUpdate,
)
from .users import (
    FollowEntry,
    FollowState,
    PublicProfile,
    PublicUser,
    UserList,
    UserProfileRead,
    UserProfileUpdate,
    UserSummary,
)

__all__ = [
    "ActivationResult",
    "AdminStats",
    "AdminUserPage",
    "AdminUserCreate",
    "LoginRequest",
    "RefreshRequest",
    "Token",
    "UserCreate",
    "MarkReadResult",
    "NotificationPage",
    "NotificationRead",
    "CommentCreate",
    "CommentList",
    "CommentRead",
    "LikeState",
    "PostCreate",
    "PostPage",
    "PostRead",
    "PostUpdate",
    "FollowEntry",
    "FollowState",
    "PublicProfile",
    "PublicUser",
    "UserList",
    "UserProfileRead",
    "UserProfileUpdate",
    "UserSummary",
]
