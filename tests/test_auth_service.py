"""Tests for app.services.auth against an in-memory SQLite credential store."""

import unittest

from app.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidRequestError,
    NotFoundError,
    UnauthenticatedError,
)
from app.models import RefreshToken, User
from app.services.auth import resolve_role

from support import FakeClock, make_auth_service, make_session_factory, make_token_service


class AuthServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.db = make_session_factory()()
        self.tokens = make_token_service(now=self.clock)
        self.service = make_auth_service(self.db, self.tokens, now=self.clock)

    def tearDown(self) -> None:
        self.db.close()


class TestRegister(AuthServiceTestCase):
    def test_register_then_login_defaults_to_user_role(self) -> None:
        user = self.service.register("a@x.com", "secret1", full_name="Alice")
        self.assertEqual(user.role, "user")
        self.assertEqual(user.full_name, "Alice")
        self.assertNotEqual(user.password_hash, "secret1")

        result = self.service.login("a@x.com", "secret1")
        self.assertEqual(result.user.id, user.id)
        self.assertEqual(result.user.role, "user")

    def test_explicit_admin_request_grants_admin(self) -> None:
        user = self.service.register("root@x.com", "secret1", requested_role="admin")
        self.assertEqual(user.role, "admin")
        self.assertEqual(self.service.login("root@x.com", "secret1").user.role, "admin")

    def test_role_resolution_is_literal(self) -> None:
        self.assertEqual(resolve_role("admin"), "admin")
        for requested in (None, "", "Admin", "ADMIN", "superuser", "user"):
            self.assertEqual(resolve_role(requested), "user", requested)

    def test_missing_fields_rejected(self) -> None:
        for email, password in ((None, "secret1"), ("a@x.com", None), ("", "")):
            with self.assertRaises(InvalidRequestError):
                self.service.register(email, password)

    def test_short_password_rejected(self) -> None:
        with self.assertRaises(InvalidRequestError) as ctx:
            self.service.register("a@x.com", "12345")
        self.assertIn("6", ctx.exception.message)

    def test_malformed_email_rejected(self) -> None:
        with self.assertRaises(InvalidRequestError):
            self.service.register("not-an-email", "secret1")

    def test_duplicate_email_conflicts(self) -> None:
        self.service.register("a@x.com", "secret1")
        with self.assertRaises(ConflictError):
            self.service.register("a@x.com", "another1")

    def test_email_match_is_case_sensitive(self) -> None:
        self.service.register("a@x.com", "secret1")
        user = self.service.register("A@x.com", "secret1")
        self.assertEqual(user.email, "A@x.com")
        self.assertEqual(self.db.query(User).count(), 2)


class TestLogin(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.service.register("a@x.com", "secret1")

    def test_unknown_email_and_wrong_password_look_identical(self) -> None:
        with self.assertRaises(InvalidCredentialsError) as unknown:
            self.service.login("nobody@x.com", "secret1")
        with self.assertRaises(InvalidCredentialsError) as wrong:
            self.service.login("a@x.com", "wrong-password")
        self.assertEqual(unknown.exception.message, wrong.exception.message)
        self.assertEqual(unknown.exception.code, wrong.exception.code)
        self.assertEqual(unknown.exception.status_code, 401)

    def test_missing_fields_rejected(self) -> None:
        with self.assertRaises(InvalidRequestError):
            self.service.login("a@x.com", "")

    def test_login_persists_one_refresh_row_per_login(self) -> None:
        first = self.service.login("a@x.com", "secret1")
        second = self.service.login("a@x.com", "secret1")
        rows = self.db.query(RefreshToken).filter(RefreshToken.user_id == self.user.id).all()
        self.assertEqual({r.token for r in rows}, {first.refresh_token, second.refresh_token})

    def test_issued_tokens_carry_identity(self) -> None:
        result = self.service.login("a@x.com", "secret1")
        claims = self.tokens.verify_access(result.access_token)
        self.assertEqual((claims.user_id, claims.email, claims.role), (self.user.id, "a@x.com", "user"))


class TestRefreshAndLogout(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.service.register("a@x.com", "secret1")
        self.session = self.service.login("a@x.com", "secret1")

    def test_refresh_returns_access_token_with_same_claims(self) -> None:
        original = self.tokens.verify_access(self.session.access_token)
        new_access = self.service.refresh(self.session.refresh_token)
        self.assertEqual(self.tokens.verify_access(new_access), original)

    def test_refresh_can_be_repeated_without_rotation(self) -> None:
        self.service.refresh(self.session.refresh_token)
        self.service.refresh(self.session.refresh_token)

    def test_absent_token_is_unauthenticated(self) -> None:
        for token in (None, ""):
            with self.assertRaises(UnauthenticatedError):
                self.service.refresh(token)

    def test_garbage_token_is_unauthenticated(self) -> None:
        with self.assertRaises(UnauthenticatedError):
            self.service.refresh("garbage")

    def test_signed_but_unstored_token_is_unauthenticated(self) -> None:
        unstored = self.tokens.issue_refresh_token(self.user.id, "a@x.com", "user")
        with self.assertRaises(UnauthenticatedError):
            self.service.refresh(unstored)

    def test_token_claiming_other_user_is_unauthenticated(self) -> None:
        # Stored row belongs to self.user; a token naming someone else must not match it.
        other = self.service.register("b@x.com", "secret1")
        row = self.db.query(RefreshToken).first()
        row.user_id = other.id
        self.db.commit()
        with self.assertRaises(UnauthenticatedError):
            self.service.refresh(self.session.refresh_token)

    def test_expired_row_is_unauthenticated(self) -> None:
        self.clock.advance(days=7, seconds=1)
        with self.assertRaises(UnauthenticatedError):
            self.service.refresh(self.session.refresh_token)

    def test_logout_then_refresh_fails(self) -> None:
        self.service.logout(self.session.refresh_token)
        with self.assertRaises(UnauthenticatedError):
            self.service.refresh(self.session.refresh_token)

    def test_logout_is_idempotent(self) -> None:
        self.service.logout(self.session.refresh_token)
        self.service.logout(self.session.refresh_token)
        self.service.logout(None)
        self.service.logout("never-issued")
        self.assertEqual(self.db.query(RefreshToken).count(), 0)

    def test_logout_only_revokes_the_given_session(self) -> None:
        other_device = self.service.login("a@x.com", "secret1")
        self.service.logout(self.session.refresh_token)
        self.assertTrue(self.service.refresh(other_device.refresh_token))

    def test_access_token_outlives_logout_until_expiry(self) -> None:
        self.service.logout(self.session.refresh_token)
        self.assertEqual(self.tokens.verify_access(self.session.access_token).user_id, self.user.id)


class TestGetProfile(AuthServiceTestCase):
    def test_returns_user(self) -> None:
        user = self.service.register("a@x.com", "secret1")
        self.assertEqual(self.service.get_profile(user.id).email, "a@x.com")

    def test_unknown_id_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.get_profile(999)


if __name__ == "__main__":
    unittest.main()
