"""Unit tests for adminauth.core.security: bcrypt hasher and JWT access token signer."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from adminauth.core.security import (
    AccessClaims,
    BcryptPasswordHasher,
    InvalidAccessToken,
    TokenSigner,
)

SECRET = "test-signing-secret-0123456789abcdef"


def _signer(clock=None, secret: str = SECRET, algorithm: str = "HS256") -> TokenSigner:
    kwargs = {"clock": clock} if clock is not None else {}
    return TokenSigner(secret, timedelta(minutes=15), algorithm=algorithm, **kwargs)


class TestBcryptPasswordHasher(unittest.TestCase):
    """BcryptPasswordHasher hashes with a salt and verifies only the original password."""

    def setUp(self) -> None:
        self.hasher = BcryptPasswordHasher(rounds=4)

    def test_verify_accepts_original_password(self) -> None:
        digest = self.hasher.hash("s3cret-pass")
        self.assertNotEqual(digest, "s3cret-pass")
        self.assertTrue(self.hasher.verify(digest, "s3cret-pass"))

    def test_verify_rejects_other_password(self) -> None:
        digest = self.hasher.hash("s3cret-pass")
        self.assertFalse(self.hasher.verify(digest, "s3cret-pasS"))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(self.hasher.hash("same"), self.hasher.hash("same"))

    def test_malformed_digest_is_rejected_not_raised(self) -> None:
        self.assertFalse(self.hasher.verify("not-a-bcrypt-hash", "anything"))


class TestTokenSignerConstruction(unittest.TestCase):
    def test_rejects_non_hmac_algorithm(self) -> None:
        with self.assertRaises(ValueError):
            TokenSigner(SECRET, timedelta(minutes=5), algorithm="RS256")

    def test_rejects_empty_secret(self) -> None:
        with self.assertRaises(ValueError):
            TokenSigner("", timedelta(minutes=5))

    def test_rejects_non_positive_ttl(self) -> None:
        with self.assertRaises(ValueError):
            TokenSigner(SECRET, timedelta(0))


class TestTokenSignerIssueAndParse(unittest.TestCase):
    """parse returns the claims issue embedded, including the version stamp."""

    def test_parse_returns_issued_claims(self) -> None:
        signer = _signer()
        token = signer.issue("user-1", "alice", 3, {"ops", "admins"})
        claims = signer.parse(token)
        self.assertIsInstance(claims, AccessClaims)
        self.assertEqual(claims.user_id, "user-1")
        self.assertEqual(claims.login, "alice")
        self.assertEqual(claims.version, 3)
        self.assertEqual(claims.groups, frozenset({"ops", "admins"}))
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(minutes=15))

    def test_payload_uses_wire_claim_names(self) -> None:
        token = _signer().issue("user-1", "alice", 1, ["b", "a"])
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        self.assertEqual(payload["uid"], "user-1")
        self.assertEqual(payload["user_ver"], 1)
        self.assertEqual(payload["groups"], ["a", "b"])

    def test_tampered_token_is_rejected(self) -> None:
        signer = _signer()
        token = signer.issue("user-1", "alice", 1, [])
        header, _, signature = token.split(".")
        forged = jwt.encode(
            {"uid": "user-1", "login": "alice", "user_ver": 99, "iat": 1, "exp": 4102444800},
            "attacker-signing-key-0123456789abcdef",
            algorithm="HS256",
        ).split(".")[1]
        tampered = ".".join([header, forged, signature])
        with self.assertRaises(InvalidAccessToken):
            signer.parse(tampered)

    def test_token_signed_with_other_key_is_rejected(self) -> None:
        token = _signer(secret="other-signing-secret-0123456789abcdef").issue("user-1", "alice", 1, [])
        with self.assertRaises(InvalidAccessToken):
            _signer().parse(token)

    def test_expired_token_is_rejected(self) -> None:
        past = datetime.now(UTC) - timedelta(hours=2)
        token = _signer(clock=lambda: past).issue("user-1", "alice", 1, [])
        with self.assertRaises(InvalidAccessToken) as ctx:
            _signer().parse(token)
        self.assertIsInstance(ctx.exception.cause, jwt.ExpiredSignatureError)

    def test_unsigned_token_is_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"uid": "user-1", "login": "alice", "user_ver": 1, "iat": now, "exp": now + timedelta(minutes=5)},
            None,
            algorithm="none",
        )
        with self.assertRaises(InvalidAccessToken):
            _signer().parse(token)

    def test_other_hmac_algorithm_is_rejected(self) -> None:
        token = _signer(algorithm="HS512").issue("user-1", "alice", 1, [])
        with self.assertRaises(InvalidAccessToken):
            _signer(algorithm="HS256").parse(token)

    def test_missing_version_claim_is_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"uid": "user-1", "login": "alice", "iat": now, "exp": now + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(InvalidAccessToken):
            _signer().parse(token)

    def test_non_integer_version_claim_is_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"uid": "user-1", "login": "alice", "user_ver": True, "iat": now, "exp": now + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(InvalidAccessToken):
            _signer().parse(token)

    def test_garbage_and_empty_tokens_are_rejected(self) -> None:
        signer = _signer()
        for token in ("", "not.a.jwt", "abc"):
            with self.subTest(token=token):
                with self.assertRaises(InvalidAccessToken):
                    signer.parse(token)


if __name__ == "__main__":
    unittest.main()
