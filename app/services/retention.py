"""Data retention: delete refresh-token rows whose expires_at has passed."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.services.credential_store import CredentialStore

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_retention(session: Session, settings: "Settings") -> int:
    """
    Purge expired refresh tokens. Expired rows are already ignored by refresh,
    so this only reclaims space. Idempotent: safe to run repeatedly.
    """
    if not settings.RETENTION_ENABLED:
        logger.info("Retention is disabled (RETENTION_ENABLED=false); skipping.")
        return 0
    return CredentialStore(session).purge_expired_refresh_tokens()
