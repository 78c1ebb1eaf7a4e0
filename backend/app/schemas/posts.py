"""Schemas for posts, likes and comments."""

from datetime import datetime

from pydantic import AliasChoices, AnyHttpUrl, BaseModel, ConfigDict, Field, constr, field_validator

from app.models.enums import PostCategory
from app.schemas.users import PublicUser

POST_MAX_LENGTH = 280
COMMENT_MAX_LENGTH = 500


class PostCreate(BaseModel):
    """Payload for publishing a post."""

    content: constr(strip_whitespace=True, min_length=1, max_length=POST_MAX_LENGTH)
    image_url: AnyHttpUrl | None = Field(default=None, description="Absolute URL of an attached image")
    category: PostCategory = PostCategory.GENERAL

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_image_url_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PostUpdate(BaseModel):
    """Partial update of a post. Passing ``image_url: null`` removes the image."""

    content: constr(strip_whitespace=True, min_length=1, max_length=POST_MAX_LENGTH) | None = None
    image_url: AnyHttpUrl | None = None
    category: PostCategory | None = None

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_image_url_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PostRead(BaseModel):
    """Post with its author projection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    content: str
    image_url: str | None = None
    category: PostCategory
    like_count: int
    comment_count: int
    created_at: datetime
    updated_at: datetime
    user: PublicUser = Field(validation_alias=AliasChoices("author", "user"))
    liked_by_me: bool | None = None


class PostPage(BaseModel):
    posts: list[PostRead] = Field(default_factory=list)
    page: int
    limit: int
    has_more: bool


class LikeState(BaseModel):
    """Result of a like or unlike request."""

    post_id: int
    liked: bool
    like_count: int
    message: str


class CommentCreate(BaseModel):
    content: constr(strip_whitespace=True, min_length=1, max_length=COMMENT_MAX_LENGTH)


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime
    user: PublicUser = Field(validation_alias=AliasChoices("author", "user"))


class CommentList(BaseModel):
    comments: list[CommentRead] = Field(default_factory=list)
