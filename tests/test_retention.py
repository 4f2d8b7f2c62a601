"""Unit and integration tests for the refresh-token retention job."""

import unittest
from datetime import timedelta
from unittest.mock import MagicMock

from app.models import RefreshToken, User
from app.services.credential_store import CredentialStore
from app.services.retention import run_retention

from support import FakeClock, make_session_factory


class TestRetentionDisabled(unittest.TestCase):
    """When RETENTION_ENABLED is False, run_retention does nothing."""

    def test_returns_zero_and_does_not_query(self) -> None:
        settings = MagicMock()
        settings.RETENTION_ENABLED = False
        session = MagicMock()
        self.assertEqual(run_retention(session, settings), 0)
        session.query.assert_not_called()


class TestRetentionDeletes(unittest.TestCase):
    """With mocks: the delete count is returned and the session committed."""

    def test_returns_deleted_count(self) -> None:
        settings = MagicMock()
        settings.RETENTION_ENABLED = True
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 2
        self.assertEqual(run_retention(session, settings), 2)
        session.commit.assert_called_once()


class TestPurgeExpiredRefreshTokens(unittest.TestCase):
    """Against SQLite: only rows past expires_at are removed."""

    def test_purges_only_expired_rows(self) -> None:
        clock = FakeClock()
        db = make_session_factory()()
        try:
            db.add(User(id=1, email="a@x.com", password_hash="x", role="user"))
            db.commit()
            store = CredentialStore(db, now=clock)
            store.save_refresh_token(1, "old", clock.current - timedelta(seconds=1))
            store.save_refresh_token(1, "live", clock.current + timedelta(days=7))

            self.assertEqual(store.purge_expired_refresh_tokens(), 1)
            self.assertEqual([r.token for r in db.query(RefreshToken).all()], ["live"])
            self.assertEqual(store.purge_expired_refresh_tokens(), 0)
            self.assertTrue(store.has_active_refresh_token(1, "live"))
        finally:
            db.close()


if __name__ == "__main__":
    unittest.main()
