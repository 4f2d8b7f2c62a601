"""Registration, login, refresh, logout and profile lookup."""

import logging
from dataclasses import dataclass
from typing import Any

from app.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidRequestError,
    NotFoundError,
    TokenInvalidError,
    UnauthenticatedError,
)
from app.core.security import (
    BCRYPT_ROUNDS,
    PASSWORD_MIN_LEN,
    hash_password,
    is_valid_email,
    verify_password,
)
from app.core.tokens import TokenService
from app.models import User
from app.models.user import ROLE_ADMIN, ROLE_USER
from app.services.credential_store import CredentialStore
from app.services.user_records import seed_user_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Access and refresh token issued together, plus the authenticated user."""

    access_token: str
    refresh_token: str
    user: User


def resolve_role(requested_role: str | None) -> str:
    """
    'admin' only when asked for literally; anything else is 'user'.

    Any caller can self-register as admin this way. Operators who need a closed
    system should provision admins with app.scripts.create_user instead.
    """
    return ROLE_ADMIN if requested_role == ROLE_ADMIN else ROLE_USER


class AuthService:
    """Auth flows composed from the password hasher, token service and credential store."""

    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenService,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        self._store = store
        self._tokens = tokens
        self._bcrypt_rounds = bcrypt_rounds

    def register(
        self,
        email: str | None,
        password: str | None,
        full_name: str | None = None,
        requested_role: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> User:
        """
        Create a user. Does not log in.

        details feeds the optional profile/preferences/address rows; their
        failure never affects the returned user.
        """
        if not email or not password:
            raise InvalidRequestError("Email and password are required.")
        if len(password) < PASSWORD_MIN_LEN:
            raise InvalidRequestError(
                f"Password must be at least {PASSWORD_MIN_LEN} characters."
            )
        if not is_valid_email(email):
            raise InvalidRequestError("Invalid email format.")

        if self._store.get_user_by_email(email) is not None:
            raise ConflictError("User already exists.")

        user = self._store.create_user(
            email=email,
            password_hash=hash_password(password, rounds=self._bcrypt_rounds),
            full_name=full_name or None,
            role=resolve_role(requested_role),
        )
        logger.info("Registered user_id=%s role=%s", user.id, user.role)

        written = seed_user_records(self._store.session, user.id, details or {})
        logger.debug("Side records for user_id=%s: %s", user.id, written)
        return user

    def login(self, email: str | None, password: str | None) -> LoginResult:
        """Verify credentials and issue an access/refresh token pair."""
        if not email or not password:
            raise InvalidRequestError("Email and password are required.")

        user = self._store.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        access_token = self._tokens.issue_access_token(user.id, user.email, user.role)
        refresh_token = self._tokens.issue_refresh_token(user.id, user.email, user.role)
        self._store.save_refresh_token(
            user.id, refresh_token, self._tokens.refresh_expires_at()
        )
        logger.info("Login succeeded for user_id=%s", user.id)
        return LoginResult(
            access_token=access_token, refresh_token=refresh_token, user=user
        )

    def refresh(self, refresh_token: str | None) -> str:
        """
        Exchange a stored, unexpired refresh token for a new access token.
        The refresh token itself is not rotated.
        """
        if not refresh_token:
            raise UnauthenticatedError("Refresh token not provided.")
        try:
            claims = self._tokens.verify_refresh(refresh_token)
        except TokenInvalidError as e:
            raise UnauthenticatedError("Invalid refresh token.") from e

        if not self._store.has_active_refresh_token(claims.user_id, refresh_token):
            raise UnauthenticatedError("Invalid or expired refresh token.")

        return self._tokens.issue_access_token(claims.user_id, claims.email, claims.role)

    def logout(self, refresh_token: str | None) -> None:
        """Revoke the refresh token if it is stored. Always succeeds."""
        if not refresh_token:
            return
        deleted = self._store.delete_refresh_token(refresh_token)
        logger.debug("Logout removed %s refresh token row(s)", deleted)

    def get_profile(self, user_id: int) -> User:
        """user_id must come from verified token claims."""
        user = self._store.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user
