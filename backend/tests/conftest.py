"""Shared pytest fixtures for backend tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Iterator

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ADMIN_REGISTRATION_KEY", "test-admin-key")
os.environ.setdefault("AUTH_CACHE_URL", "")

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.core import security
from app.database import get_db
from app.main import app
from app.models import Base, User

ADMIN_KEY = "test-admin-key"
PASSWORD = "secret123"

# Keep hashing cheap in tests
security.pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto", pbkdf2_sha256__rounds=1000)


@pytest.fixture()
def test_engine() -> Iterator[Engine]:
    """Provide an in-memory SQLite engine for isolated tests."""

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(test_engine) -> sessionmaker[Session]:
    """Return a session factory bound to the test engine."""

    return sessionmaker(bind=test_engine, autoflush=False, future=True)


@pytest.fixture()
def db_session(session_factory) -> Iterator[Session]:
    """Yield a SQLAlchemy session for unit tests."""

    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory) -> Iterator[TestClient]:
    """Yield a FastAPI TestClient with the database dependency overridden."""

    def override_get_db() -> Iterator[Session]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session) -> Callable[..., User]:
    """Create users directly in the database for service-level tests."""

    def factory(username: str, *, is_admin: bool = False, is_active: bool = True) -> User:
        user = User(
            username=username,
            email=f"{username.lower()}@example.com",
            hashed_password=security.get_password_hash(PASSWORD),
            is_admin=is_admin,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return factory


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def signup(client) -> Callable[..., tuple[dict, dict[str, str]]]:
    """Register and log in through the API, returning ``(profile, headers)``."""

    def factory(username: str, *, admin: bool = False) -> tuple[dict, dict[str, str]]:
        payload = {"email": f"{username.lower()}@example.com", "username": username, "password": PASSWORD}
        if admin:
            response = client.post("/api/auth/register-admin", json={**payload, "admin_key": ADMIN_KEY})
        else:
            response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        login = client.post("/api/auth/login", json={"email": payload["email"], "password": PASSWORD})
        assert login.status_code == 200, login.text
        return response.json(), auth_headers(login.json()["access_token"])

    return factory
