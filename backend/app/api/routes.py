from fastapi import APIRouter

from app.api.admin import router as admin_router
from app.api.auth import router as auth_router
from app.api.feed import router as feed_router
from app.api.notifications import router as notifications_router
from app.api.posts import router as posts_router
from app.api.users import router as users_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(posts_router)
router.include_router(feed_router)
router.include_router(users_router)
router.include_router(notifications_router)
router.include_router(admin_router)


@router.get("/", tags=["root"])
def read_root() -> dict[str, str]:
    return {"message": "Welcome to the Tether API"}
