"""FastAPI dependencies for the API layer."""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.security import decode_access_token
from app.database import get_db
from app.models import User
from app.services.errors import Forbidden, Unauthorized

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_user_from_token(token: str, db: Session) -> User:
    """Resolve an active user from a JWT token or raise :class:`Unauthorized`."""

    payload = decode_access_token(token)
    sub = payload.get("sub")
    if sub is None:
        raise Unauthorized("Could not validate credentials")

    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise Unauthorized("Could not validate credentials") from None

    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized("Could not validate credentials")
    if not user.is_active:
        raise Unauthorized("Account is deactivated")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Retrieve the current user from the bearer token."""

    return get_user_from_token(token, db)


def get_optional_user(
    token: str | None = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> User | None:
    """Like :func:`get_current_user` but returns ``None`` for anonymous callers.

    Public reads never fail on credentials: an expired, malformed or revoked
    token is treated the same as no token.
    """

    if not token:
        return None
    try:
        return get_user_from_token(token, db)
    except Unauthorized:
        return None


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the caller is an administrator, raising HTTP 403 otherwise."""

    if not current_user.is_admin:
        raise Forbidden("Forbidden - Admin access required")
    return current_user
