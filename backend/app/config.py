from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = Field(default="Tether API", env="APP_NAME", description="Human readable service name")
    environment: str = Field(default="development", env="ENVIRONMENT", description="Deployment environment name")
    debug: bool = Field(default=False, env="DEBUG", description="Enable debug mode")
    log_level: str = Field(default="INFO", env="LOG_LEVEL", description="Level for the application loggers")

    cors_origins: Annotated[List[AnyHttpUrl], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost",
            "http://localhost:3000",
            "http://127.0.0.1",
            "http://127.0.0.1:3000",
        ],
        env="CORS_ORIGINS",
        description="List of allowed CORS origins",
    )
    cors_allow_origin_regex: str | None = Field(
        default=r"^https?://(localhost|127\.0\.0\.1|\[::1\])(:\d+)?$",
        env="CORS_ALLOW_ORIGIN_REGEX",
        description="Optional regular expression that matches allowed CORS origins",
    )

    database_url: str = Field(
        default="postgresql+psycopg://tether:tether@db:5432/tether",
        env="DATABASE_URL",
        description="SQLAlchemy connection URL of the primary database",
    )
    database_pool_size: int = Field(default=10, env="DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(default=20, env="DATABASE_MAX_OVERFLOW")

    jwt_secret_key: str = Field(default="changeme", env="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", env="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=30, env="ACCESS_TOKEN_EXPIRE_MINUTES")

    refresh_token_expire_minutes: int = Field(default=60 * 24, env="REFRESH_TOKEN_EXPIRE_MINUTES")
    refresh_token_remember_me_expire_minutes: int = Field(
        default=60 * 24 * 30, env="REFRESH_TOKEN_REMEMBER_ME_EXPIRE_MINUTES"
    )
    remember_me_enabled: bool = Field(default=True, env="REMEMBER_ME_ENABLED")
    refresh_token_cookie_name: str = Field(default="tether_refresh", env="REFRESH_TOKEN_COOKIE_NAME")
    refresh_token_cookie_secure: bool = Field(default=False, env="REFRESH_TOKEN_COOKIE_SECURE")
    refresh_token_cookie_samesite: str = Field(default="lax", env="REFRESH_TOKEN_COOKIE_SAMESITE")
    refresh_token_cookie_path: str = Field(default="/api/auth", env="REFRESH_TOKEN_COOKIE_PATH")
    refresh_token_cookie_domain: str | None = Field(default=None, env="REFRESH_TOKEN_COOKIE_DOMAIN")
    auth_cache_url: str | None = Field(
        default=None,
        env="AUTH_CACHE_URL",
        description="Redis URL used to store refresh tokens. In-process storage is used when unset.",
    )

    admin_registration_key: str | None = Field(
        default=None,
        env="ADMIN_REGISTRATION_KEY",
        description="Shared secret required by the admin registration endpoint. Disabled when unset.",
    )

    feed_page_size: int = Field(default=20, env="FEED_PAGE_SIZE", ge=1, le=100)
    notifications_page_size: int = Field(default=20, env="NOTIFICATIONS_PAGE_SIZE", ge=1, le=100)
    admin_page_size: int = Field(default=50, env="ADMIN_PAGE_SIZE", ge=1, le=200)
    user_search_limit: int = Field(default=20, env="USER_SEARCH_LIMIT", ge=1)
    discover_limit: int = Field(default=12, env="DISCOVER_LIMIT", ge=1)
    admin_recent_limit: int = Field(default=10, env="ADMIN_RECENT_LIMIT", ge=1)

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def database_connect_args(self) -> dict[str, object]:
        if self.database_url.startswith("sqlite"):
            return {"check_same_thread": False}
        return {}

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):  # type: ignore[override]
        if v in (None, "", Ellipsis):
            return v
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, (list, tuple, set)):
            return list(v)
        return v

    @field_validator("admin_registration_key", "auth_cache_url", mode="before")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value in (None, "", Ellipsis):
            return None
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
