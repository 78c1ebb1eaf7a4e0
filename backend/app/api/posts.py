"""HTTP endpoints for posts, likes and comments."""

from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user
from app.config import get_settings
from app.database import get_db
from app.models import Post, User
from app.schemas import (
    CommentCreate,
    CommentList,
    CommentRead,
    LikeState,
    PostCreate,
    PostPage,
    PostRead,
    PostUpdate,
)
from app.services import engagement, feed
from app.services.pagination import Page

router = APIRouter(prefix="/posts", tags=["posts"])

settings = get_settings()


def serialize_posts(db: Session, posts: Sequence[Post], viewer: User | None) -> list[PostRead]:
    """Convert posts to their API form, filling ``liked_by_me`` when a viewer is known."""

    liked: set[int] = set()
    if viewer is not None:
        liked = engagement.liked_post_ids(db, viewer.id, (post.id for post in posts))
    items: list[PostRead] = []
    for post in posts:
        item = PostRead.model_validate(post)
        if viewer is not None:
            item.liked_by_me = post.id in liked
        items.append(item)
    return items


def build_post_page(db: Session, page: Page[Post], viewer: User | None) -> PostPage:
    return PostPage(
        posts=serialize_posts(db, page.items, viewer),
        page=page.page,
        limit=page.limit,
        has_more=page.has_more,
    )


@router.get("", response_model=PostPage)
def list_posts(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
) -> PostPage:
    """Global timeline: every post, newest first."""

    result = feed.global_feed(db, page=page, page_size=settings.feed_page_size)
    return build_post_page(db, result, viewer)


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    post = engagement.create_post(db, current_user, payload)
    return PostRead.model_validate(post)


@router.get("/{post_id}", response_model=PostRead)
def read_post(
    post_id: int,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
) -> PostRead:
    post = engagement.get_post(db, post_id)
    return serialize_posts(db, [post], viewer)[0]


@router.patch("/{post_id}", response_model=PostRead)
def update_post(
    post_id: int,
    payload: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    """Edit a post. Only its author may do so."""

    post = engagement.update_post(db, current_user, post_id, payload)
    return PostRead.model_validate(post)


@router.delete("/{post_id}")
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str]:
    """Delete a post with its comments, likes and notifications."""

    engagement.delete_post(db, current_user, post_id)
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/like", response_model=LikeState)
def like_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LikeState:
    post = engagement.like(db, current_user, post_id)
    return LikeState(post_id=post.id, liked=True, like_count=post.like_count, message="Post liked successfully")


@router.delete("/{post_id}/like", response_model=LikeState)
def unlike_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LikeState:
    post = engagement.unlike(db, current_user, post_id)
    return LikeState(post_id=post.id, liked=False, like_count=post.like_count, message="Post unliked successfully")


@router.get("/{post_id}/comments", response_model=CommentList)
def list_comments(post_id: int, db: Session = Depends(get_db)) -> CommentList:
    """Comments on a post, oldest first."""

    comments = engagement.list_comments(db, post_id)
    return CommentList(comments=[CommentRead.model_validate(comment) for comment in comments])


@router.post("/{post_id}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CommentRead:
    comment = engagement.add_comment(db, current_user, post_id, payload.content)
    return CommentRead.model_validate(comment)
