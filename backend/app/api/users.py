"""User profiles, discovery and the follow graph."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user
from app.api.posts import build_post_page
from app.config import get_settings
from app.database import get_db
from app.models import User
from app.schemas import (
    FollowEntry,
    FollowState,
    PostPage,
    PublicProfile,
    UserList,
    UserProfileRead,
    UserProfileUpdate,
    UserSummary,
)
from app.services import directory, feed, graph

router = APIRouter(prefix="/users", tags=["users"])

settings = get_settings()


def _summary(user: User, is_following: bool) -> UserSummary:
    summary = UserSummary.model_validate(user)
    summary.is_following = is_following
    return summary


@router.get("/me", response_model=UserProfileRead)
def read_profile(current_user: User = Depends(get_current_user)) -> UserProfileRead:
    """Return profile information for the authenticated user."""

    return UserProfileRead.model_validate(current_user)


@router.patch("/me", response_model=UserProfileRead)
def update_profile(
    payload: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserProfileRead:
    """Update mutable profile fields for the current user."""

    user = directory.update_profile(db, current_user, payload)
    return UserProfileRead.model_validate(user)


@router.get("/search", response_model=UserList)
def search_users(
    q: str = Query("", max_length=100),
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
) -> UserList:
    results = directory.search_users(db, q, viewer=viewer, limit=settings.user_search_limit)
    return UserList(users=[_summary(user, following) for user, following in results])


@router.get("/discover", response_model=UserList)
def discover_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserList:
    """Suggest accounts the caller does not follow yet."""

    users = directory.discover_users(db, current_user, limit=settings.discover_limit)
    return UserList(users=[_summary(user, False) for user in users])


@router.get("/{user_id}", response_model=PublicProfile)
def read_user(user_id: int, db: Session = Depends(get_db)) -> PublicProfile:
    return PublicProfile.model_validate(directory.get_profile(db, user_id))


@router.get("/{user_id}/posts", response_model=PostPage)
def read_user_posts(
    user_id: int,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
) -> PostPage:
    directory.get_profile(db, user_id)
    result = feed.user_posts(db, user_id, page=page, page_size=settings.feed_page_size)
    return build_post_page(db, result, viewer)


@router.post("/{user_id}/follow", response_model=FollowState)
def follow_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> FollowState:
    target = graph.follow(db, current_user, user_id)
    return FollowState(
        user_id=target.id,
        following=True,
        followers_count=target.followers_count,
        message="User followed successfully",
    )


@router.delete("/{user_id}/follow", response_model=FollowState)
def unfollow_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> FollowState:
    """Stop following a user. Succeeds even when no edge existed."""

    graph.unfollow(db, current_user, user_id)
    target = db.get(User, user_id)
    return FollowState(
        user_id=user_id,
        following=False,
        followers_count=target.followers_count if target is not None else 0,
        message="User unfollowed successfully",
    )


@router.get("/{user_id}/followers", response_model=list[FollowEntry])
def list_followers(user_id: int, db: Session = Depends(get_db)) -> list[FollowEntry]:
    return [
        FollowEntry(id=user.id, username=user.username, avatar_url=user.avatar_url, followed_at=edge.created_at)
        for user, edge in graph.list_followers(db, user_id)
    ]


@router.get("/{user_id}/following", response_model=list[FollowEntry])
def list_following(user_id: int, db: Session = Depends(get_db)) -> list[FollowEntry]:
    return [
        FollowEntry(id=user.id, username=user.username, avatar_url=user.avatar_url, followed_at=edge.created_at)
        for user, edge in graph.list_following(db, user_id)
    ]
