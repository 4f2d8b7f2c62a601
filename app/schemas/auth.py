"""Request/response schemas for auth endpoints."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """
    Registration payload. email/password are checked by the auth service so
    that missing values yield 400, not a schema error.

    The optional profile, preference and address fields seed side records on
    a best-effort basis.
    """

    email: str | None = None
    password: str | None = None
    full_name: str | None = None
    role: str | None = None

    phone: str | None = None
    date_of_birth: str | date | None = None
    bio: str | None = None

    theme: str | None = None
    language: str | None = None
    notifications_enabled: bool | None = None

    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    address_type: str | None = None

    def side_record_details(self) -> dict[str, Any]:
        return self.model_dump(
            exclude={"email", "password", "full_name", "role"}, exclude_none=True
        )


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = None
    password: str | None = None


class RefreshRequest(BaseModel):
    """Refresh token in the body; used only when no refreshToken cookie is sent."""

    refresh_token: str | None = Field(default=None, alias="refreshToken")

    class Config:
        populate_by_name = True


class PublicUser(BaseModel):
    """User fields safe to return to clients (never the password hash)."""

    id: int
    email: str
    full_name: str | None = None
    role: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    message: str = "User registered successfully!"
    user: PublicUser


class LoginResponse(BaseModel):
    """Token pair returned after successful login (also set as httpOnly cookies)."""

    message: str = "Login successful!"
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")
    user: PublicUser

    class Config:
        populate_by_name = True


class RefreshResponse(BaseModel):
    message: str = "Token refreshed successfully!"
    access_token: str = Field(..., alias="accessToken")

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str


class ProfileUser(PublicUser):
    """Public user fields plus optional side records (each None when absent)."""

    profile: dict[str, Any] | None = None
    preferences: dict[str, Any] | None = None
    address: dict[str, Any] | None = None


class ProfileResponse(BaseModel):
    user: ProfileUser


class UsersListResponse(BaseModel):
    """Response for GET /auth/users (admin only)."""

    users: list[PublicUser]
