"""Tests for the create_user CLI against a temporary SQLite database."""

import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from unittest.mock import patch

from adminauth.core.config import Settings
from adminauth.core.database import build_engine, build_session_factory
from adminauth.core.security import BcryptPasswordHasher
from adminauth.scripts import create_user
from adminauth.storage.sql import SqlCredentialStore


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.db_url = f"sqlite:///{os.path.join(self.tmpdir.name, 'auth.db')}"
        settings = Settings(_env_file=None, DATABASE_URL=self.db_url, BCRYPT_ROUNDS=4)
        patcher = patch.object(create_user, "get_settings", return_value=settings)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = StringIO(), StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = create_user.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_user_with_groups(self) -> None:
        code, out, _ = self._run("admin", "secret-pass", "--group", "admins", "--group", "ops")
        self.assertEqual(code, 0)
        self.assertIn("Created user 'admin'", out)

        engine = build_engine(self.db_url)
        try:
            user = SqlCredentialStore(build_session_factory(engine)).get_user_by_login("admin")
        finally:
            engine.dispose()
        self.assertEqual(user.groups, {"admins", "ops"})
        self.assertEqual(user.version, 1)
        self.assertTrue(BcryptPasswordHasher().verify(user.password_digest, "secret-pass"))

    def test_existing_login_fails(self) -> None:
        self.assertEqual(self._run("admin", "secret-pass")[0], 0)
        code, _, err = self._run("admin", "other-pass")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_blank_login_fails(self) -> None:
        code, _, err = self._run("   ", "secret-pass")
        self.assertEqual(code, 1)
        self.assertIn("Invalid login", err)


if __name__ == "__main__":
    unittest.main()
