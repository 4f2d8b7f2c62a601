"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    ProfileUser,
    PublicUser,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    UsersListResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.issue import IssueOut, IssueResponse, IssueTextRequest

__all__ = [
    "HealthResponse",
    "IssueOut",
    "IssueResponse",
    "IssueTextRequest",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "ProfileResponse",
    "ProfileUser",
    "PublicUser",
    "RefreshRequest",
    "RefreshResponse",
    "RegisterRequest",
    "RegisterResponse",
    "UsersListResponse",
]
