"""Auth endpoints: register, login, refresh, logout, profile, admin user list."""

from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_auth_service, get_credential_store
from app.api.guard import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_current_claims,
    require_admin,
)
from app.core.config import get_settings
from app.core.database import get_db
from app.core.tokens import TokenClaims, TokenService, get_token_service
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
from app.services.auth import AuthService
from app.services.credential_store import CredentialStore
from app.services.user_records import load_user_records

router = APIRouter()


def _set_auth_cookie(response: Response, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        httponly=True,
        secure=get_settings().cookie_secure,
        samesite="strict",
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> RegisterResponse:
    """
    Create an account. Does not log in.

    Optional profile, preference and address fields are stored best-effort; if
    any of them is rejected the account is still created.
    """
    user = auth.register(
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        requested_role=body.role,
        details=body.side_record_details(),
    )
    return RegisterResponse(user=PublicUser.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> LoginResponse:
    """
    Authenticate with email and password. Returns an access token (15 min) and a
    refresh token (7 days), also set as httpOnly cookies.
    """
    result = auth.login(body.email, body.password)
    _set_auth_cookie(
        response, ACCESS_COOKIE, result.access_token, int(tokens.access_ttl.total_seconds())
    )
    _set_auth_cookie(
        response, REFRESH_COOKIE, result.refresh_token, int(tokens.refresh_ttl.total_seconds())
    )
    return LoginResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        user=PublicUser.model_validate(result.user),
    )


@router.post("/refresh", response_model=RefreshResponse)
def refresh(
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    body: RefreshRequest | None = None,
    refresh_cookie: Annotated[str | None, Cookie(alias=REFRESH_COOKIE)] = None,
) -> RefreshResponse:
    """Exchange a refresh token (refreshToken cookie, else body) for a new access token."""
    token = refresh_cookie or (body.refresh_token if body else None)
    access_token = auth.refresh(token)
    _set_auth_cookie(
        response, ACCESS_COOKIE, access_token, int(tokens.access_ttl.total_seconds())
    )
    return RefreshResponse(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    _claims: Annotated[TokenClaims, Depends(get_current_claims)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
    body: RefreshRequest | None = None,
    refresh_cookie: Annotated[str | None, Cookie(alias=REFRESH_COOKIE)] = None,
) -> MessageResponse:
    """Revoke the refresh token if present and clear both auth cookies."""
    auth.logout(refresh_cookie or (body.refresh_token if body else None))
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)
    return MessageResponse(message="Logout successful!")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    """Current user from the verified token, with profile, preferences and address if stored."""
    user = auth.get_profile(claims.user_id)
    records = load_user_records(db, user.id)
    return ProfileResponse(
        user=ProfileUser(**PublicUser.model_validate(user).model_dump(), **records)
    )


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(
        users=[PublicUser.model_validate(u) for u in store.list_users()]
    )
