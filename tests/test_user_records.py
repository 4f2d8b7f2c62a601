"""Tests for best-effort side records written at registration and read for the profile."""

import unittest
from datetime import date
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from app.models import User, UserAddress, UserPreferences, UserProfile
from app.services.user_records import load_user_records, seed_user_records

from support import make_auth_service, make_session_factory, make_token_service


class TestSeedUserRecords(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.service = make_auth_service(self.db, make_token_service())

    def tearDown(self) -> None:
        self.db.close()

    def test_all_rows_written_from_details(self) -> None:
        user = self.service.register(
            "a@x.com",
            "secret1",
            details={
                "phone": "555-0100",
                "date_of_birth": "1990-04-01",
                "bio": "hi",
                "theme": "dark",
                "language": "fr",
                "notifications_enabled": False,
                "street": "1 Main St",
                "city": "Springfield",
                "country": "US",
                "address_type": "work",
            },
        )
        records = load_user_records(self.db, user.id)
        self.assertEqual(records["profile"]["phone"], "555-0100")
        self.assertEqual(records["profile"]["date_of_birth"], date(1990, 4, 1))
        self.assertEqual(records["preferences"]["theme"], "dark")
        self.assertFalse(records["preferences"]["notifications_enabled"])
        self.assertEqual(records["address"]["city"], "Springfield")
        self.assertEqual(records["address"]["address_type"], "work")
        self.assertTrue(records["address"]["is_primary"])

    def test_defaults_without_details_and_no_address(self) -> None:
        user = self.service.register("a@x.com", "secret1")
        records = load_user_records(self.db, user.id)
        self.assertIsNotNone(records["profile"])
        self.assertEqual(records["preferences"]["theme"], "light")
        self.assertEqual(records["preferences"]["language"], "en")
        self.assertIsNone(records["address"])

    def test_bad_profile_does_not_block_user_or_other_rows(self) -> None:
        user = self.service.register(
            "a@x.com",
            "secret1",
            details={"date_of_birth": "31/31/1990", "theme": "dark", "city": "Paris"},
        )
        self.assertIsNotNone(self.db.query(User).filter(User.id == user.id).first())
        self.assertEqual(self.db.query(UserProfile).count(), 0)
        self.assertEqual(self.db.query(UserPreferences).count(), 1)
        self.assertEqual(self.db.query(UserAddress).count(), 1)

    def test_invalid_address_type_skips_only_address(self) -> None:
        user = self.service.register(
            "a@x.com", "secret1", details={"street": "1 Main St", "address_type": "castle"}
        )
        records = load_user_records(self.db, user.id)
        self.assertIsNone(records["address"])
        self.assertIsNotNone(records["profile"])

    def test_database_failure_is_swallowed_per_row(self) -> None:
        db = MagicMock()
        db.begin_nested.side_effect = [
            OperationalError("INSERT", {}, Exception("db down")),
            MagicMock(),
        ]
        written = seed_user_records(db, 1, {})
        self.assertEqual(written, ["preferences"])
        db.rollback.assert_called_once()

    def test_load_for_user_without_rows(self) -> None:
        self.assertEqual(
            load_user_records(self.db, 12345),
            {"profile": None, "preferences": None, "address": None},
        )


if __name__ == "__main__":
    unittest.main()
