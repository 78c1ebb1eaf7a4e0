"""Unit tests for authentication helpers and endpoints."""

from __future__ import annotations

import pytest
from fastapi import Response

from app.api.auth import login_user
from app.api.deps import get_user_from_token, require_admin
from app.core.security import (
    RefreshTokenError,
    create_access_token,
    issue_refresh_token,
    redeem_refresh_token,
    revoke_refresh_token,
    revoke_user_sessions,
)
from app.schemas import LoginRequest
from app.services import directory
from app.services.errors import Conflict, Forbidden, Unauthorized

from conftest import PASSWORD


def test_login_user_returns_token(db_session, make_user):
    """Successful login should return a bearer token and set the refresh cookie."""

    make_user("tester")
    response = Response()
    token = login_user(LoginRequest(email="tester@example.com", password=PASSWORD), response, db_session)

    assert token.token_type == "bearer"
    assert isinstance(token.access_token, str) and token.access_token
    assert "tether_refresh=" in response.headers["set-cookie"]


def test_login_is_case_insensitive_on_email(db_session, make_user):
    user = make_user("casey")
    assert directory.authenticate(db_session, "CASEY@Example.com", PASSWORD).id == user.id


def test_login_user_rejects_invalid_credentials(db_session, make_user):
    """Invalid credentials must raise an HTTP 401 error."""

    make_user("tester")
    with pytest.raises(Unauthorized) as exc:
        login_user(LoginRequest(email="tester@example.com", password="wrong-one"), Response(), db_session)

    assert exc.value.status_code == 401
    assert "Incorrect email or password" in exc.value.detail


def test_deactivated_account_cannot_log_in(db_session, make_user):
    make_user("sleepy", is_active=False)
    with pytest.raises(Unauthorized):
        directory.authenticate(db_session, "sleepy@example.com", PASSWORD)


def test_get_user_from_token(db_session, make_user):
    """Tokens should resolve to existing users."""

    user = make_user("tester")
    token = create_access_token(user.id)
    resolved = get_user_from_token(token, db_session)

    assert resolved.id == user.id
    assert resolved.username == "tester"


def test_get_user_from_token_invalid_payload(db_session):
    """Invalid tokens must result in a 401 error."""

    with pytest.raises(Unauthorized) as exc:
        get_user_from_token("invalid-token", db_session)

    assert exc.value.status_code == 401
    assert "Could not validate credentials" in exc.value.detail


def test_get_user_from_token_rejects_unknown_and_inactive_users(db_session, make_user):
    with pytest.raises(Unauthorized):
        get_user_from_token(create_access_token(999), db_session)

    inactive = make_user("ghost", is_active=False)
    with pytest.raises(Unauthorized):
        get_user_from_token(create_access_token(inactive.id), db_session)


def test_require_admin(make_user):
    admin = make_user("boss", is_admin=True)
    member = make_user("member")

    assert require_admin(admin) is admin
    with pytest.raises(Forbidden) as exc:
        require_admin(member)
    assert exc.value.status_code == 403


def test_create_account_rejects_duplicates(db_session, make_user):
    make_user("taken")
    with pytest.raises(Conflict):
        directory.create_account(db_session, email="other@example.com", username="taken", password=PASSWORD)
    with pytest.raises(Conflict):
        directory.create_account(db_session, email="TAKEN@example.com", username="fresh", password=PASSWORD)


def test_refresh_token_is_single_use():
    token, ttl = issue_refresh_token(42, remember_me=True)
    assert ttl > 0

    session = redeem_refresh_token(token)
    assert session.user_id == 42
    assert session.remember_me is True

    with pytest.raises(RefreshTokenError):
        redeem_refresh_token(token)


def test_refresh_token_revocation():
    token, _ = issue_refresh_token(43)
    revoke_refresh_token(token)
    with pytest.raises(RefreshTokenError):
        redeem_refresh_token(token)

    first, _ = issue_refresh_token(44)
    second, _ = issue_refresh_token(44)
    survivor, _ = issue_refresh_token(45)
    assert revoke_user_sessions(44) == 2
    for token in (first, second):
        with pytest.raises(RefreshTokenError):
            redeem_refresh_token(token)
    assert redeem_refresh_token(survivor).user_id == 45


def test_refresh_token_rejects_tampered_secret():
    token, _ = issue_refresh_token(7)
    token_id, _, _ = token.partition(".")
    with pytest.raises(RefreshTokenError):
        redeem_refresh_token(f"{token_id}.not-the-secret")
    with pytest.raises(RefreshTokenError):
        redeem_refresh_token("malformed")
