"""Unit tests for pictura.core.database: session scope and connectivity check."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from pictura.core.database import check_db_connected, session_scope
from pictura.core.security import hash_password
from pictura.models import User
from tests.helpers import make_engine, make_sessionmaker


class TestSessionScope(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.Session = make_sessionmaker(self.engine)

    def tearDown(self) -> None:
        self.engine.dispose()

    def test_pending_work_is_rolled_back_on_error(self) -> None:
        with self.assertRaises(RuntimeError):
            with session_scope(self.Session) as db:
                db.add(User(name="Ana", email="a@x.com", password_hash=hash_password("secret1")))
                db.flush()
                raise RuntimeError("boom")
        with session_scope(self.Session) as db:
            self.assertEqual(db.query(User).count(), 0)

    def test_committed_work_survives(self) -> None:
        with session_scope(self.Session) as db:
            db.add(User(name="Ana", email="a@x.com", password_hash=hash_password("secret1")))
            db.commit()
        with session_scope(self.Session) as db:
            self.assertEqual(db.query(User).count(), 1)

    def test_session_is_closed_after_block(self) -> None:
        fake = MagicMock()
        with session_scope(lambda: fake):
            pass
        fake.close.assert_called_once()
        fake.rollback.assert_not_called()


class TestCheckDbConnected(unittest.TestCase):
    def test_reachable(self) -> None:
        engine = make_engine()
        try:
            db = make_sessionmaker(engine)()
            self.assertTrue(check_db_connected(db))
            db.close()
        finally:
            engine.dispose()

    def test_unreachable(self) -> None:
        db = MagicMock()
        db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        self.assertFalse(check_db_connected(db))


if __name__ == "__main__":
    unittest.main()
