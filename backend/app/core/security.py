"""Credentials and tokens.

Access tokens are short-lived JWTs carrying the user id in ``sub``. Refresh
tokens are opaque ``"<token_id>.<secret>"`` strings; only a SHA-256 digest of
the secret is kept in the session store, next to the owner and expiry.
"""

from __future__ import annotations

import hashlib
import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from fastapi import Response
from passlib.context import CryptContext

from app.config import get_settings
from app.services.errors import Unauthorized
from app.services.sessions import get_session_store

settings = get_settings()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class RefreshTokenError(Exception):
    """The refresh token is malformed, unknown, expired or does not match."""


@dataclass(slots=True)
class RefreshSession:
    token_id: str
    user_id: int
    remember_me: bool
    expires_at: datetime


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# Access tokens -------------------------------------------------------------


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {"sub": str(user_id), "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Return the JWT claims or raise :class:`Unauthorized`."""

    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise Unauthorized("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthorized("Could not validate credentials") from exc


# Refresh tokens ------------------------------------------------------------


def _digest(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def _split(token: str) -> tuple[str, str]:
    token_id, sep, secret = token.partition(".")
    if not sep or not token_id or not secret:
        raise RefreshTokenError("Malformed refresh token")
    return token_id, secret


def _refresh_lifetime(remember_me: bool) -> timedelta:
    minutes = (
        settings.refresh_token_remember_me_expire_minutes
        if remember_me
        else settings.refresh_token_expire_minutes
    )
    return timedelta(minutes=max(minutes, 1))


def _open_session(token_id: str, secret: str, record: str | None) -> RefreshSession:
    if record is None:
        raise RefreshTokenError("Unknown or expired refresh token")
    try:
        data = json.loads(record)
        expires_at = datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        user_id = int(data["uid"])
    except (ValueError, KeyError, TypeError) as exc:
        raise RefreshTokenError("Corrupted refresh session") from exc

    if not secrets.compare_digest(str(data.get("digest", "")), _digest(secret)):
        raise RefreshTokenError("Refresh token does not match")
    if expires_at <= datetime.now(timezone.utc):
        raise RefreshTokenError("Refresh token expired")
    return RefreshSession(
        token_id=token_id,
        user_id=user_id,
        remember_me=bool(data.get("remember_me")),
        expires_at=expires_at,
    )


def issue_refresh_token(user_id: int, *, remember_me: bool = False) -> tuple[str, int]:
    """Start a refresh session and return ``(token, ttl_seconds)``."""

    remember_me = remember_me and settings.remember_me_enabled
    lifetime = _refresh_lifetime(remember_me)
    ttl = int(lifetime.total_seconds())
    token_id = secrets.token_urlsafe(16)
    secret = secrets.token_urlsafe(32)
    record = {
        "uid": user_id,
        "digest": _digest(secret),
        "exp": int((datetime.now(timezone.utc) + lifetime).timestamp()),
        "remember_me": remember_me,
    }
    get_session_store().save(token_id, json.dumps(record), ttl, user_id=str(user_id))
    return f"{token_id}.{secret}", ttl


def redeem_refresh_token(token: str) -> RefreshSession:
    """Validate and consume a refresh token. A token can be redeemed once."""

    token_id, secret = _split(token)
    return _open_session(token_id, secret, get_session_store().take(token_id))


def revoke_refresh_token(token: str) -> None:
    token_id, _, _ = token.partition(".")
    if token_id:
        get_session_store().discard(token_id)


def revoke_user_sessions(user_id: int) -> int:
    """Drop every refresh session of ``user_id``."""

    return get_session_store().discard_user(str(user_id))


# Cookies -------------------------------------------------------------------


def set_refresh_cookie(response: Response, token: str, ttl_seconds: int) -> None:
    response.set_cookie(
        key=settings.refresh_token_cookie_name,
        value=token,
        max_age=ttl_seconds,
        httponly=True,
        secure=settings.refresh_token_cookie_secure,
        samesite=settings.refresh_token_cookie_samesite,
        path=settings.refresh_token_cookie_path,
        domain=settings.refresh_token_cookie_domain,
    )


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.refresh_token_cookie_name,
        path=settings.refresh_token_cookie_path,
        domain=settings.refresh_token_cookie_domain,
    )
