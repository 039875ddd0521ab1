"""External identity verification: turn a third-party assertion into a verified email."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import httpx

if TYPE_CHECKING:
    from adminauth.core.config import Settings


class ExternalIdentityError(Exception):
    """Raised when an identity assertion cannot be verified (invalid, unreachable provider, not configured)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ExternalIdentityVerifier(Protocol):
    def verify(self, assertion: str) -> str:
        """Return the verified email for assertion or raise ExternalIdentityError."""
        ...


def _is_truthy_claim(value: object) -> bool:
    # tokeninfo returns booleans as strings ("true"/"false").
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


class GoogleIdTokenVerifier:
    """
    Verify Google ID tokens through the tokeninfo endpoint.

    Google checks signature and expiry; we check the audience matches our client
    id and that the email is present and verified.
    """

    def __init__(
        self,
        client_id: str | None,
        tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.client_id = client_id
        self.tokeninfo_url = tokeninfo_url
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleIdTokenVerifier":
        return cls(
            client_id=settings.GOOGLE_OAUTH_CLIENT_ID,
            tokeninfo_url=settings.GOOGLE_TOKENINFO_URL,
            timeout=settings.GOOGLE_REQUEST_TIMEOUT_SEC,
        )

    def _fetch_tokeninfo(self, id_token: str) -> httpx.Response:
        params = {"id_token": id_token}
        if self._client is not None:
            return self._client.get(self.tokeninfo_url, params=params, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(self.tokeninfo_url, params=params)

    def verify(self, assertion: str) -> str:
        if not self.client_id:
            raise ExternalIdentityError("google client id not configured")
        if not assertion:
            raise ExternalIdentityError("empty id token")

        try:
            resp = self._fetch_tokeninfo(assertion)
        except httpx.TimeoutException as e:
            raise ExternalIdentityError("Google tokeninfo request timed out.", cause=e) from e
        except httpx.HTTPError as e:
            raise ExternalIdentityError(f"Cannot reach Google tokeninfo: {e}", cause=e) from e

        if resp.status_code != 200:
            raise ExternalIdentityError(f"id token rejected (HTTP {resp.status_code})")
        try:
            claims = resp.json()
        except ValueError as e:
            raise ExternalIdentityError("tokeninfo returned invalid JSON", cause=e) from e
        if not isinstance(claims, dict):
            raise ExternalIdentityError("tokeninfo returned unexpected payload")

        if claims.get("aud") != self.client_id:
            raise ExternalIdentityError("id token audience mismatch")
        email = claims.get("email")
        if not isinstance(email, str) or not email:
            raise ExternalIdentityError("email not present in id token")
        if not _is_truthy_claim(claims.get("email_verified")):
            raise ExternalIdentityError("email not verified by identity provider")
        return email
