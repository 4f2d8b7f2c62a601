"""Request-time authorization: bearer/cookie access token and admin check.

Claims returned here are the only trusted identity for downstream handlers;
user ids in request bodies are never consulted.
"""

import logging
from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import ForbiddenError, MissingTokenError
from app.core.tokens import TokenClaims, TokenService, get_token_service
from app.models.user import ROLE_ADMIN

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

bearer_scheme = HTTPBearer(auto_error=False)


def extract_access_token(
    credentials: HTTPAuthorizationCredentials | None, cookie_token: str | None
) -> str | None:
    """Authorization header wins over the cookie when both are present."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return cookie_token or None


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    access_cookie: Annotated[str | None, Cookie(alias=ACCESS_COOKIE)] = None,
) -> TokenClaims:
    """
    Dependency: require a valid access token. Raises MissingTokenError,
    TokenExpiredError or TokenInvalidError (all 401, distinguishable by code).
    """
    token = extract_access_token(credentials, access_cookie)
    if not token:
        raise MissingTokenError()
    return tokens.verify_access(token)


def require_admin(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> TokenClaims:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if claims.role != ROLE_ADMIN:
        logger.info("Admin-only access denied for user_id=%s", claims.user_id)
        raise ForbiddenError("Access denied. Admin only.")
    return claims
