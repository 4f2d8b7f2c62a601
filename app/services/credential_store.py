"""Persistence of users and refresh-token rows."""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.core.tokens import utc_now
from app.models import RefreshToken, User

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    User identities and refresh-token revocation state, backed by SQLAlchemy.

    Holds no state of its own beyond the session; every check is a query, so
    concurrent requests rely on the database's per-row atomicity.
    """

    def __init__(self, db: Session, now: Callable[[], datetime] = utc_now) -> None:
        self._db = db
        self._now = now

    @property
    def session(self) -> Session:
        return self._db

    def get_user_by_email(self, email: str) -> User | None:
        return self._db.query(User).filter(User.email == email).first()

    def get_user_by_id(self, user_id: int) -> User | None:
        return self._db.query(User).filter(User.id == user_id).first()

    def list_users(self) -> list[User]:
        return self._db.query(User).order_by(User.id).all()

    def create_user(
        self,
        email: str,
        password_hash: str,
        full_name: str | None,
        role: str,
    ) -> User:
        """Insert and commit a user. Raises ConflictError if the email is taken."""
        user = User(
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
        )
        self._db.add(user)
        try:
            self._db.commit()
        except IntegrityError as e:
            # Two concurrent registrations can both pass the existence check.
            self._db.rollback()
            raise ConflictError("User already exists.") from e
        self._db.refresh(user)
        return user

    def save_refresh_token(self, user_id: int, token: str, expires_at: datetime) -> RefreshToken:
        row = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        self._db.add(row)
        self._db.commit()
        return row

    def has_active_refresh_token(self, user_id: int, token: str) -> bool:
        """True if a row matches token and owner and has not expired."""
        row = (
            self._db.query(RefreshToken.id)
            .filter(
                RefreshToken.token == token,
                RefreshToken.user_id == user_id,
                RefreshToken.expires_at > self._now(),
            )
            .first()
        )
        return row is not None

    def delete_refresh_token(self, token: str) -> int:
        """Delete the row holding token; returns rows removed (0 if none)."""
        deleted = (
            self._db.query(RefreshToken)
            .filter(RefreshToken.token == token)
            .delete(synchronize_session=False)
        )
        self._db.commit()
        return deleted

    def purge_expired_refresh_tokens(self) -> int:
        """Delete refresh-token rows past expires_at. Idempotent."""
        cutoff = self._now()
        deleted = (
            self._db.query(RefreshToken)
            .filter(RefreshToken.expires_at <= cutoff)
            .delete(synchronize_session=False)
        )
        self._db.commit()
        if deleted:
            logger.info(
                "Purged expired refresh tokens: cutoff=%s, deleted=%s",
                cutoff.isoformat(),
                deleted,
            )
        return deleted
