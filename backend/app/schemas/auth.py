"""Schemas for authentication endpoints."""

from pydantic import BaseModel, EmailStr, Field, constr

from app.schemas.users import USERNAME_PATTERN


class UserCreate(BaseModel):
    """Payload for creating a new user via registration."""

    email: EmailStr = Field(..., description="Email address used to sign in")
    username: constr(min_length=3, max_length=20, pattern=USERNAME_PATTERN) = Field(
        ..., description="Unique handle made of letters, digits and underscores"
    )
    password: constr(min_length=6, max_length=128) = Field(
        ..., description="Plain text password that will be hashed before storing"
    )


class AdminUserCreate(UserCreate):
    """Registration payload for administrators; requires the shared admin key."""

    admin_key: str = Field(..., description="Value of ADMIN_REGISTRATION_KEY")


class LoginRequest(BaseModel):
    """Payload for user login."""

    email: EmailStr = Field(..., description="Registered email address")
    password: constr(min_length=1, max_length=128) = Field(..., description="User password")
    remember_me: bool = Field(
        default=False,
        description="Request a long-lived refresh token (stored in an HttpOnly cookie)",
    )


class Token(BaseModel):
    """Access token returned after successful authentication."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type, always 'bearer'")
    refresh_token: str | None = Field(
        default=None,
        description="Opaque refresh token identifier (also set as an HttpOnly cookie)",
    )
    expires_in: int | None = Field(default=None, description="Seconds until the access token expires")


class RefreshRequest(BaseModel):
    """Payload carrying a refresh token when cookies are unavailable."""

    refresh_token: str | None = None
