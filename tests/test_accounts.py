"""Tests for pictura.services.accounts: registration, login, profile, block and delete."""

import unittest

from pictura.core.errors import (
    AuthError,
    BlockedError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from pictura.core.security import decode_access_token, verify_password
from pictura.models import Post, PostComment, PostLike, PostReport, User
from pictura.schemas.auth import ProfileUpdateRequest, RegisterRequest
from pictura.services import accounts
from tests.helpers import (
    create_admin,
    create_post,
    create_user,
    make_engine,
    make_sessionmaker,
)


class AccountsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = make_sessionmaker(self.engine)()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def _register(self, **overrides: object) -> tuple[User, str]:
        data = {"name": "Ana", "email": "a@x.com", "password": "secret1", "phone": "555"}
        data.update(overrides)
        return accounts.register(self.db, RegisterRequest(**data))


class TestRegister(AccountsTestCase):
    def test_creates_regular_active_account(self) -> None:
        user, token = self._register()
        self.assertEqual(user.role, "user")
        self.assertTrue(user.is_active)
        self.assertFalse(user.is_blocked)
        self.assertEqual(user.login_count, 0)
        self.assertEqual(decode_access_token(token)["sub"], str(user.id))

    def test_password_is_stored_hashed(self) -> None:
        user, _ = self._register()
        self.assertNotEqual(user.password_hash, "secret1")
        self.assertTrue(verify_password("secret1", user.password_hash))

    def test_email_is_normalized(self) -> None:
        user, _ = self._register(email="  Mixed.Case@X.COM ")
        self.assertEqual(user.email, "mixed.case@x.com")

    def test_trims_name_and_phone(self) -> None:
        user, _ = self._register(name="  Ana  ", phone="  555  ")
        self.assertEqual(user.name, "Ana")
        self.assertEqual(user.phone, "555")

    def test_missing_fields_rejected(self) -> None:
        for field in ("name", "email", "password"):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    self._register(**{field: ""})

    def test_short_password_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self._register(password="12345")

    def test_password_over_72_bytes_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self._register(password="a" * 73)
        with self.assertRaises(ValidationError):
            self._register(password="\u00e9" * 37)

    def test_invalid_email_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self._register(email="not-an-email")

    def test_long_name_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self._register(name="x" * 51)

    def test_duplicate_email_is_conflict_case_insensitive(self) -> None:
        self._register(email="a@x.com")
        with self.assertRaises(ConflictError):
            self._register(email="A@X.com")


class TestAuthenticate(AccountsTestCase):
    def test_scenario_register_wrong_then_right_password(self) -> None:
        user, _ = self._register(email="a@x.com", password="secret1")
        self.assertEqual(user.role, "user")
        with self.assertRaises(AuthError):
            accounts.authenticate(self.db, "a@x.com", "wrong")
        self.assertEqual(user.login_count, 0)
        logged_in, token = accounts.authenticate(self.db, "a@x.com", "secret1")
        self.assertEqual(logged_in.login_count, 1)
        self.assertIsNotNone(logged_in.last_login)
        self.assertTrue(token)

    def test_unknown_email_and_wrong_password_share_message(self) -> None:
        self._register()
        with self.assertRaises(AuthError) as unknown:
            accounts.authenticate(self.db, "nobody@x.com", "secret1")
        with self.assertRaises(AuthError) as wrong:
            accounts.authenticate(self.db, "a@x.com", "wrong-password")
        self.assertEqual(unknown.exception.message, wrong.exception.message)
        self.assertEqual(unknown.exception.message, accounts.INVALID_CREDENTIALS)

    def test_password_sharing_first_72_bytes_is_not_accepted(self) -> None:
        self._register(password="a" * 72)
        with self.assertRaises(AuthError):
            accounts.authenticate(self.db, "a@x.com", "a" * 72 + "WRONG!")
        user, _ = accounts.authenticate(self.db, "a@x.com", "a" * 72)
        self.assertEqual(user.login_count, 1)

    def test_email_lookup_is_case_insensitive(self) -> None:
        self._register(email="a@x.com")
        user, _ = accounts.authenticate(self.db, "A@X.COM", "secret1")
        self.assertEqual(user.email, "a@x.com")

    def test_missing_credentials_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            accounts.authenticate(self.db, "", "secret1")

    def test_blocked_account_gets_reason(self) -> None:
        create_user(self.db, email="b@x.com", is_blocked=True, block_reason="spam")
        with self.assertRaises(BlockedError) as ctx:
            accounts.authenticate(self.db, "b@x.com", "secret1")
        self.assertIn("spam", ctx.exception.message)

    def test_blocked_account_with_wrong_password_is_plain_auth_error(self) -> None:
        create_user(self.db, email="b@x.com", is_blocked=True, block_reason="spam")
        with self.assertRaises(AuthError):
            accounts.authenticate(self.db, "b@x.com", "wrong-password")

    def test_inactive_account_rejected(self) -> None:
        create_user(self.db, email="c@x.com", is_active=False)
        with self.assertRaises(BlockedError):
            accounts.authenticate(self.db, "c@x.com", "secret1")


class TestUpdateProfile(AccountsTestCase):
    def test_partial_update_keeps_omitted_fields(self) -> None:
        user, _ = self._register(name="Ana", phone="555")
        updated = accounts.update_profile(self.db, user.id, ProfileUpdateRequest(bio="hi there"))
        self.assertEqual(updated.name, "Ana")
        self.assertEqual(updated.phone, "555")
        self.assertEqual(updated.bio, "hi there")

    def test_updates_name(self) -> None:
        user, _ = self._register()
        updated = accounts.update_profile(self.db, user.id, ProfileUpdateRequest(name="Bea"))
        self.assertEqual(updated.name, "Bea")

    def test_long_bio_rejected(self) -> None:
        user, _ = self._register()
        with self.assertRaises(ValidationError):
            accounts.update_profile(self.db, user.id, ProfileUpdateRequest(bio="x" * 501))

    def test_unknown_account(self) -> None:
        with self.assertRaises(NotFoundError):
            accounts.update_profile(self.db, 999, ProfileUpdateRequest(name="Bea"))


class TestBlock(AccountsTestCase):
    def test_scenario_block_with_reason_then_login_fails(self) -> None:
        admin = create_admin(self.db)
        target = create_user(self.db, email="t@x.com")
        blocked = accounts.set_blocked(self.db, admin, target.id, True, "spam")
        self.assertTrue(blocked.is_blocked)
        self.assertEqual(blocked.block_reason, "spam")
        with self.assertRaises(BlockedError) as ctx:
            accounts.authenticate(self.db, "t@x.com", "secret1")
        self.assertIn("spam", ctx.exception.message)

    def test_block_without_reason_uses_default(self) -> None:
        admin = create_admin(self.db)
        target = create_user(self.db, email="t@x.com")
        blocked = accounts.set_blocked(self.db, admin, target.id, True)
        self.assertEqual(blocked.block_reason, accounts.DEFAULT_BLOCK_REASON)

    def test_unblock_clears_reason(self) -> None:
        admin = create_admin(self.db)
        target = create_user(self.db, email="t@x.com", is_blocked=True, block_reason="spam")
        unblocked = accounts.set_blocked(self.db, admin, target.id, False)
        self.assertFalse(unblocked.is_blocked)
        self.assertEqual(unblocked.block_reason, "")

    def test_unblocking_unblocked_account_is_noop(self) -> None:
        admin = create_admin(self.db)
        target = create_user(self.db, email="t@x.com")
        first = accounts.set_blocked(self.db, admin, target.id, False)
        state = (first.is_blocked, first.block_reason)
        second = accounts.set_blocked(self.db, admin, target.id, False)
        self.assertEqual((second.is_blocked, second.block_reason), state)
        self.assertEqual(state, (False, ""))

    def test_toggle_flips_state(self) -> None:
        admin = create_admin(self.db)
        target = create_user(self.db, email="t@x.com")
        self.assertTrue(accounts.toggle_block(self.db, admin, target.id, "spam").is_blocked)
        self.assertFalse(accounts.toggle_block(self.db, admin, target.id).is_blocked)

    def test_self_block_rejected(self) -> None:
        admin = create_admin(self.db)
        with self.assertRaises(ValidationError):
            accounts.set_blocked(self.db, admin, admin.id, True, "oops")
        with self.assertRaises(ValidationError):
            accounts.toggle_block(self.db, admin, admin.id)

    def test_unknown_target(self) -> None:
        admin = create_admin(self.db)
        with self.assertRaises(NotFoundError):
            accounts.set_blocked(self.db, admin, 999, True)


class TestDelete(AccountsTestCase):
    def test_cascades_to_authored_content(self) -> None:
        admin = create_admin(self.db)
        target = create_user(self.db, email="t@x.com")
        other = create_user(self.db, email="o@x.com")
        own_post = create_post(self.db, target)
        other_post = create_post(self.db, other)
        self.db.add_all(
            [
                PostLike(post_id=own_post.id, user_id=other.id),
                PostComment(post_id=own_post.id, user_id=other.id, text="nice"),
                PostLike(post_id=other_post.id, user_id=target.id),
                PostComment(post_id=other_post.id, user_id=target.id, text="cool"),
                PostReport(post_id=other_post.id, user_id=target.id, reason="meh"),
            ]
        )
        self.db.commit()
        target_id, own_post_id = target.id, own_post.id

        accounts.delete_account(self.db, admin, target_id)

        self.assertIsNone(self.db.get(User, target_id))
        self.assertIsNone(self.db.get(Post, own_post_id))
        self.assertIsNotNone(self.db.get(Post, other_post.id))
        self.assertEqual(self.db.query(PostLike).count(), 0)
        self.assertEqual(self.db.query(PostComment).count(), 0)
        self.assertEqual(self.db.query(PostReport).count(), 0)

    def test_self_delete_rejected(self) -> None:
        admin = create_admin(self.db)
        with self.assertRaises(ValidationError):
            accounts.delete_account(self.db, admin, admin.id)
        self.assertIsNotNone(self.db.get(User, admin.id))

    def test_unknown_target(self) -> None:
        admin = create_admin(self.db)
        with self.assertRaises(NotFoundError):
            accounts.delete_account(self.db, admin, 999)


class TestEnsureAdmin(AccountsTestCase):
    def test_creates_admin_when_absent(self) -> None:
        user, created = accounts.ensure_admin(self.db, "Root@X.com", "supersecret", "Root")
        self.assertTrue(created)
        self.assertEqual(user.role, "admin")
        self.assertEqual(user.email, "root@x.com")
        self.assertTrue(verify_password("supersecret", user.password_hash))

    def test_is_idempotent(self) -> None:
        first, _ = accounts.ensure_admin(self.db, "root@x.com", "supersecret", "Root")
        second, created = accounts.ensure_admin(self.db, "root@x.com", "other-password", "Other")
        self.assertFalse(created)
        self.assertEqual(first.id, second.id)
        self.assertEqual(self.db.query(User).count(), 1)
        self.assertTrue(verify_password("supersecret", second.password_hash))

    def test_existing_account_is_left_untouched(self) -> None:
        create_user(self.db, email="root@x.com")
        user, created = accounts.ensure_admin(self.db, "root@x.com", "supersecret", "Root")
        self.assertFalse(created)
        self.assertEqual(user.role, "user")


if __name__ == "__main__":
    unittest.main()
