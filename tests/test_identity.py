"""Unit tests for adminauth.services.identity: Google ID token verification over tokeninfo."""

import unittest

import httpx

from adminauth.services.identity import ExternalIdentityError, GoogleIdTokenVerifier

CLIENT_ID = "client-123.apps.googleusercontent.com"
TOKENINFO_URL = "https://oauth2.example.test/tokeninfo"


def _verifier(handler, client_id: str | None = CLIENT_ID) -> GoogleIdTokenVerifier:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GoogleIdTokenVerifier(client_id, tokeninfo_url=TOKENINFO_URL, timeout=5.0, client=client)


def _claims(**overrides: object) -> dict:
    claims = {"aud": CLIENT_ID, "email": "carol@example.com", "email_verified": "true"}
    claims.update(overrides)
    return claims


class TestGoogleIdTokenVerifier(unittest.TestCase):
    def test_returns_verified_email(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_claims())

        self.assertEqual(_verifier(handler).verify("id-token-abc"), "carol@example.com")
        self.assertEqual(seen[0].url.params["id_token"], "id-token-abc")
        self.assertEqual(seen[0].url.host, "oauth2.example.test")
        self.assertEqual(seen[0].url.path, "/tokeninfo")

    def test_boolean_email_verified_is_accepted(self) -> None:
        verifier = _verifier(lambda r: httpx.Response(200, json=_claims(email_verified=True)))
        self.assertEqual(verifier.verify("tok"), "carol@example.com")

    def test_not_configured(self) -> None:
        verifier = _verifier(lambda r: httpx.Response(200, json=_claims()), client_id=None)
        with self.assertRaises(ExternalIdentityError) as ctx:
            verifier.verify("tok")
        self.assertIn("not configured", ctx.exception.message)

    def test_empty_assertion(self) -> None:
        with self.assertRaises(ExternalIdentityError):
            _verifier(lambda r: httpx.Response(200, json=_claims())).verify("")

    def test_rejected_by_google(self) -> None:
        verifier = _verifier(lambda r: httpx.Response(400, json={"error": "invalid_token"}))
        with self.assertRaises(ExternalIdentityError) as ctx:
            verifier.verify("tok")
        self.assertIn("400", ctx.exception.message)

    def test_audience_mismatch(self) -> None:
        verifier = _verifier(lambda r: httpx.Response(200, json=_claims(aud="someone-else")))
        with self.assertRaises(ExternalIdentityError):
            verifier.verify("tok")

    def test_missing_email(self) -> None:
        claims = _claims()
        del claims["email"]
        verifier = _verifier(lambda r: httpx.Response(200, json=claims))
        with self.assertRaises(ExternalIdentityError):
            verifier.verify("tok")

    def test_unverified_email(self) -> None:
        verifier = _verifier(lambda r: httpx.Response(200, json=_claims(email_verified="false")))
        with self.assertRaises(ExternalIdentityError):
            verifier.verify("tok")

    def test_invalid_json(self) -> None:
        verifier = _verifier(lambda r: httpx.Response(200, content=b"<html>"))
        with self.assertRaises(ExternalIdentityError):
            verifier.verify("tok")

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(ExternalIdentityError) as ctx:
            _verifier(handler).verify("tok")
        self.assertIsInstance(ctx.exception.cause, httpx.ConnectError)

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with self.assertRaises(ExternalIdentityError) as ctx:
            _verifier(handler).verify("tok")
        self.assertIn("timed out", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
