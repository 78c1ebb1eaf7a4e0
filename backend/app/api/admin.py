"""Administrator endpoints: statistics and moderation."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.api.posts import build_post_page
from app.config import get_settings
from app.database import get_db
from app.models import User
from app.schemas import ActivationResult, AdminStats, AdminUserPage, PostPage, UserProfileRead
from app.services import directory, engagement, moderation

router = APIRouter(prefix="/admin", tags=["admin"])

settings = get_settings()


@router.get("/stats", response_model=AdminStats)
def read_stats(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> AdminStats:
    """Platform totals plus the most recent signups and posts."""

    stats = moderation.collect_stats(db, recent_limit=settings.admin_recent_limit)
    return AdminStats.model_validate(stats)


@router.get("/users", response_model=AdminUserPage)
def list_users(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> AdminUserPage:
    result = moderation.list_users(db, page=page, page_size=settings.admin_page_size)
    return AdminUserPage(
        users=[UserProfileRead.model_validate(user) for user in result.items],
        page=result.page,
        limit=result.limit,
        has_more=result.has_more,
    )


@router.get("/users/{user_id}", response_model=UserProfileRead)
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserProfileRead:
    return UserProfileRead.model_validate(directory.get_profile(db, user_id))


@router.post("/users/{user_id}/deactivate", response_model=ActivationResult)
def toggle_user_active(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ActivationResult:
    """Deactivate an account, or reactivate it when it is already inactive."""

    user = moderation.toggle_active(db, admin, user_id)
    return ActivationResult(
        user_id=user.id,
        is_active=user.is_active,
        message="User activated" if user.is_active else "User deactivated",
    )


@router.get("/posts", response_model=PostPage)
def list_posts(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> PostPage:
    result = moderation.list_posts(db, page=page, page_size=settings.admin_page_size)
    return build_post_page(db, result, None)


@router.delete("/posts/{post_id}")
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict[str, str]:
    engagement.delete_post(db, admin, post_id)
    return {"message": "Post deleted by admin"}
