"""Schemas returned by the admin moderation endpoints."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.schemas.users import PublicUser, UserProfileRead


class RecentUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    created_at: datetime
    is_active: bool


class RecentPost(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    created_at: datetime
    like_count: int
    comment_count: int
    user: PublicUser = Field(validation_alias=AliasChoices("author", "user"))


class AdminStats(BaseModel):
    total_users: int
    active_users: int
    users_active_today: int
    total_posts: int
    posts_today: int
    total_likes: int
    total_comments: int
    total_follows: int
    recent_users: list[RecentUser] = Field(default_factory=list)
    recent_posts: list[RecentPost] = Field(default_factory=list)
    timestamp: datetime


class AdminUserPage(BaseModel):
    users: list[UserProfileRead] = Field(default_factory=list)
    page: int
    limit: int
    has_more: bool


class ActivationResult(BaseModel):
    user_id: int
    is_active: bool
    message: str
