"""Signed access and refresh tokens (JWT).

Access and refresh tokens live in separate signing domains: each has its own
secret and a ``type`` claim, so one can never be presented as the other.
Verification here is purely stateless; whether a refresh token has been
revoked is answered by the credential store.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import jwt

from app.core.config import get_settings
from app.core.errors import TokenExpiredError, TokenInvalidError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

DEFAULT_ACCESS_TTL = timedelta(minutes=15)
DEFAULT_REFRESH_TTL = timedelta(days=7)

_REQUIRED_CLAIMS = ["sub", "email", "role", "type", "iat", "exp"]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried inside a verified token."""

    user_id: int
    email: str
    role: str


class TokenService:
    """Issue and verify access/refresh JWTs.

    ``now`` is injectable so expiry can be exercised without sleeping.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = DEFAULT_ACCESS_TTL,
        refresh_ttl: timedelta = DEFAULT_REFRESH_TTL,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh secrets are required")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh secrets must differ")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._now = now

    def issue_access_token(self, user_id: int, email: str, role: str) -> str:
        """Sign a short-lived access token for the given identity."""
        return self._encode(
            user_id, email, role, ACCESS_TOKEN_TYPE, self.access_ttl, self._access_secret
        )

    def issue_refresh_token(self, user_id: int, email: str, role: str) -> str:
        """
        Sign a long-lived refresh token. The caller must persist it with
        expires_at = refresh_expires_at() for it to be usable.
        """
        return self._encode(
            user_id,
            email,
            role,
            REFRESH_TOKEN_TYPE,
            self.refresh_ttl,
            self._refresh_secret,
            jti=uuid.uuid4().hex,
        )

    def refresh_expires_at(self) -> datetime:
        """Absolute expiry to store alongside a refresh token issued now."""
        return self._now() + self.refresh_ttl

    def verify_access(self, token: str) -> TokenClaims:
        """
        Check signature, type and expiry of an access token.
        Raises TokenExpiredError or TokenInvalidError.
        """
        payload = self._decode(token, self._access_secret, ACCESS_TOKEN_TYPE)
        if int(self._now().timestamp()) >= int(payload["exp"]):
            raise TokenExpiredError()
        return self._claims(payload)

    def verify_refresh(self, token: str) -> TokenClaims:
        """Check signature and structure only; freshness is checked against the store."""
        payload = self._decode(token, self._refresh_secret, REFRESH_TOKEN_TYPE)
        return self._claims(payload)

    def _encode(
        self,
        user_id: int,
        email: str,
        role: str,
        token_type: str,
        ttl: timedelta,
        secret: str,
        jti: str | None = None,
    ) -> str:
        now = self._now()
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "type": token_type,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        if jti:
            payload["jti"] = jti
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def _decode(self, token: str, secret: str, expected_type: str) -> dict[str, Any]:
        # exp/iat are checked against the injected clock, not PyJWT's wall clock.
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": _REQUIRED_CLAIMS,
                },
            )
        except jwt.PyJWTError as e:
            raise TokenInvalidError() from e
        if payload.get("type") != expected_type:
            raise TokenInvalidError()
        if not isinstance(payload.get("exp"), int):
            raise TokenInvalidError()
        return payload

    @staticmethod
    def _claims(payload: dict[str, Any]) -> TokenClaims:
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise TokenInvalidError() from e
        return TokenClaims(
            user_id=user_id,
            email=str(payload.get("email") or ""),
            role=str(payload.get("role") or "user"),
        )


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built from settings (FastAPI dependency)."""
    s = get_settings()
    return TokenService(
        access_secret=s.JWT_SECRET.get_secret_value(),
        refresh_secret=s.JWT_REFRESH_SECRET.get_secret_value(),
        algorithm=s.JWT_ALGORITHM,
        access_ttl=timedelta(minutes=s.ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_ttl=timedelta(days=s.REFRESH_TOKEN_EXPIRE_DAYS),
    )
