"""FastAPI providers wiring settings and the DB session into services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.tokens import TokenService, get_token_service
from app.services.auth import AuthService
from app.services.credential_store import CredentialStore


def get_credential_store(db: Annotated[Session, Depends(get_db)]) -> CredentialStore:
    return CredentialStore(db)


def get_auth_service(
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    return AuthService(store, tokens, bcrypt_rounds=get_settings().BCRYPT_ROUNDS)
