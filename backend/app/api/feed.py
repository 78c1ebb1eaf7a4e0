"""Personalized feed endpoint."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.posts import build_post_page
from app.config import get_settings
from app.database import get_db
from app.models import User
from app.schemas import PostPage
from app.services import feed

router = APIRouter(prefix="/feed", tags=["feed"])

settings = get_settings()


@router.get("", response_model=PostPage)
def read_feed(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostPage:
    """Posts by the caller and the people they follow, newest first."""

    result = feed.personal_feed(db, current_user, page=page, page_size=settings.feed_page_size)
    return build_post_page(db, result, current_user)
