"""Registration, login and token endpoints."""

import secrets

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.security import (
    RefreshTokenError,
    clear_refresh_cookie,
    create_access_token,
    issue_refresh_token,
    redeem_refresh_token,
    revoke_refresh_token,
    set_refresh_cookie,
)
from app.database import get_db
from app.models import User
from app.schemas import AdminUserCreate, LoginRequest, RefreshRequest, Token, UserCreate, UserProfileRead
from app.services import directory
from app.services.errors import Forbidden, Unauthorized

router = APIRouter()
settings = get_settings()


def _token_pair(user: User, response: Response, *, remember_me: bool) -> Token:
    refresh_token, ttl = issue_refresh_token(user.id, remember_me=remember_me)
    set_refresh_cookie(response, refresh_token, ttl)
    return Token(
        access_token=create_access_token(user.id),
        refresh_token=refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


def _refresh_token_from(request: Request, payload: RefreshRequest | None) -> str | None:
    if payload is not None and payload.refresh_token:
        return payload.refresh_token
    return request.cookies.get(settings.refresh_token_cookie_name)


@router.post("/register", response_model=UserProfileRead, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)) -> UserProfileRead:
    user = directory.create_account(db, email=user_in.email, username=user_in.username, password=user_in.password)
    return UserProfileRead.model_validate(user)


@router.post("/register-admin", response_model=UserProfileRead, status_code=status.HTTP_201_CREATED)
def register_admin(user_in: AdminUserCreate, db: Session = Depends(get_db)) -> UserProfileRead:
    """Create an administrator. Disabled unless ``ADMIN_REGISTRATION_KEY`` is set."""

    expected = settings.admin_registration_key
    if not expected or not secrets.compare_digest(user_in.admin_key, expected):
        raise Forbidden("Invalid admin registration key")

    user = directory.create_account(
        db,
        email=user_in.email,
        username=user_in.username,
        password=user_in.password,
        is_admin=True,
        bio="Administrator",
    )
    return UserProfileRead.model_validate(user)


@router.post("/login", response_model=Token)
def login_user(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)) -> Token:
    user = directory.authenticate(db, credentials.email, credentials.password)
    return _token_pair(user, response, remember_me=credentials.remember_me)


@router.post("/refresh", response_model=Token)
def refresh_access_token(
    request: Request,
    response: Response,
    payload: RefreshRequest | None = None,
    db: Session = Depends(get_db),
) -> Token:
    """Exchange a refresh token (body or cookie) for a new token pair.

    The presented refresh token is consumed.
    """

    refresh_token = _refresh_token_from(request, payload)
    if not refresh_token:
        raise Unauthorized("Refresh token is required")
    try:
        session = redeem_refresh_token(refresh_token)
    except RefreshTokenError as exc:
        raise Unauthorized("Could not validate refresh token") from exc

    user = db.get(User, session.user_id)
    if user is None or not user.is_active:
        raise Unauthorized("User not found")
    return _token_pair(user, response, remember_me=session.remember_me)


@router.post("/logout")
def logout_user(request: Request, response: Response, payload: RefreshRequest | None = None) -> dict[str, str]:
    """Revoke the refresh token and clear its cookie. Access tokens simply expire."""

    refresh_token = _refresh_token_from(request, payload)
    if refresh_token:
        revoke_refresh_token(refresh_token)
    clear_refresh_cookie(response)
    return {"message": "Logged out successfully"}
