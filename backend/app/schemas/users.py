"""Schemas related to user profiles and the follow graph."""

from datetime import datetime

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, constr, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


class PublicUser(BaseModel):
    """Minimal author projection embedded in posts, comments and notifications."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    avatar_url: str | None = None


class PublicProfile(PublicUser):
    """Profile visible to everyone; never includes the email address."""

    bio: str | None = None
    website: str | None = None
    location: str | None = None
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    is_private: bool = False
    is_admin: bool = False
    created_at: datetime


class UserProfileRead(PublicProfile):
    """Detailed representation of the current user profile."""

    email: str
    is_active: bool = True
    updated_at: datetime


class UserProfileUpdate(BaseModel):
    """Payload for ``PATCH /users/me``. Omitted fields are left untouched."""

    username: constr(min_length=3, max_length=20, pattern=USERNAME_PATTERN) | None = None
    bio: constr(strip_whitespace=True, max_length=160) | None = None
    website: AnyHttpUrl | None = None
    location: constr(strip_whitespace=True, max_length=50) | None = None
    avatar_url: AnyHttpUrl | None = None
    is_private: bool | None = None

    @field_validator("website", "avatar_url", mode="before")
    @classmethod
    def blank_url_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class UserSummary(PublicUser):
    """Search and discover result card."""

    bio: str | None = None
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    is_admin: bool = False
    created_at: datetime
    is_following: bool = False


class UserList(BaseModel):
    users: list[UserSummary] = Field(default_factory=list)


class FollowEntry(PublicUser):
    """User on the other side of a follow edge."""

    followed_at: datetime


class FollowState(BaseModel):
    """Result of a follow or unfollow request."""

    user_id: int
    following: bool
    followers_count: int
    message: str
