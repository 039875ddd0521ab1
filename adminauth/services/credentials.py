"""
Credential lifecycle: registration, password login, password change, refresh
rotation, access token validation and external-identity login.

Expected failures come back as AuthError values on the result. Store and
signing malfunctions are not translated and propagate to the caller.
"""

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Callable

from adminauth.core.security import InvalidAccessToken, PasswordHasher, TokenSigner
from adminauth.services.identity import ExternalIdentityError, ExternalIdentityVerifier
from adminauth.storage.base import CredentialStore
from adminauth.storage.errors import (
    LoginTaken,
    RefreshTokenNotFound,
    RefreshTokenRevoked,
    StoreError,
    UserNotFound,
)
from adminauth.storage.records import RefreshToken, User

logger = logging.getLogger(__name__)

# Bytes of entropy in a refresh token value.
REFRESH_TOKEN_BYTES = 32


class AuthError(str, Enum):
    """Domain failure codes returned to callers."""

    INVALID_LOGIN = "InvalidLogin"
    LOGIN_ALREADY_IN_USE = "LoginAlreadyInUse"
    USER_NOT_FOUND = "UserNotFound"
    INVALID_PASSWORD = "InvalidPassword"
    INVALID_TOKEN = "InvalidToken"
    STALE_TOKEN = "StaleToken"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AuthResult:
    """
    Outcome of a token-issuing operation.

    revocation_failed is set when the operation succeeded but revoking older
    refresh tokens did not; the failure has already been logged.
    """

    tokens: TokenPair | None = None
    error: AuthError | None = None
    revocation_failed: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: AuthError) -> "AuthResult":
        return cls(error=error)


@dataclass(frozen=True)
class ValidationResult:
    error: AuthError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CredentialLifecycleManager:
    """Ties the credential store and token signer together. Holds no per-request state."""

    def __init__(
        self,
        store: CredentialStore,
        signer: TokenSigner,
        hasher: PasswordHasher,
        identity_verifier: ExternalIdentityVerifier,
        refresh_ttl: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if refresh_ttl <= timedelta(0):
            raise ValueError("refresh token ttl must be positive")
        self.store = store
        self.signer = signer
        self.hasher = hasher
        self.identity_verifier = identity_verifier
        self.refresh_ttl = refresh_ttl
        self._clock = clock
        self._dummy_digest: str | None = None

    def ping(self) -> None:
        return None

    def register(self, login: str, password: str) -> AuthResult:
        if not login or not password:
            return AuthResult.failed(AuthError.INVALID_LOGIN)

        digest = self.hasher.hash(password)
        try:
            user = self.store.create_user(login, digest)
        except LoginTaken:
            return AuthResult.failed(AuthError.LOGIN_ALREADY_IN_USE)

        logger.info("User registered: user_id=%s", user.id)
        return AuthResult(tokens=self._issue_tokens(user))

    def authenticate(self, login: str, password: str) -> AuthResult:
        try:
            user = self.store.get_user_by_login(login)
        except UserNotFound:
            return AuthResult.failed(AuthError.USER_NOT_FOUND)

        if not user.password_login_enabled or user.password_digest is None:
            # Same bcrypt work as a real check.
            self.hasher.verify(self._get_dummy_digest(), password or "")
            return AuthResult.failed(AuthError.INVALID_PASSWORD)
        if not self.hasher.verify(user.password_digest, password or ""):
            return AuthResult.failed(AuthError.INVALID_PASSWORD)

        return AuthResult(tokens=self._issue_tokens(user))

    def update_password(self, login: str, new_password: str) -> AuthResult:
        """
        Replace the password and bump the user's version.

        The version bump is persisted before anything else, so every access token
        minted earlier is stale from that point on even if the rest is interrupted.
        """
        try:
            self.store.get_user_by_login(login)
        except UserNotFound:
            return AuthResult.failed(AuthError.USER_NOT_FOUND)
        if not new_password:
            return AuthResult.failed(AuthError.INVALID_LOGIN)

        digest = self.hasher.hash(new_password)
        try:
            user = self.store.change_password(login, digest)
        except UserNotFound:
            return AuthResult.failed(AuthError.USER_NOT_FOUND)
        logger.info("Password changed: user_id=%s, version=%s", user.id, user.version)

        revocation_failed = False
        try:
            revoked = self.store.revoke_all_refresh_tokens_for_user(user.id)
            logger.info("Refresh tokens revoked: user_id=%s, count=%s", user.id, revoked)
        except StoreError:
            # Older refresh tokens are still rejected by their version stamp.
            revocation_failed = True
            logger.exception("Failed to revoke refresh tokens after password change: user_id=%s", user.id)

        return AuthResult(tokens=self._issue_tokens(user), revocation_failed=revocation_failed)

    def refresh(self, refresh_token: str) -> AuthResult:
        """
        Exchange a refresh token for a new pair. The presented token is single-use:
        the swap is one store operation that fails if the token was already revoked.
        """
        if not refresh_token:
            return AuthResult.failed(AuthError.INVALID_TOKEN)
        now = self._clock()
        try:
            current = self.store.get_refresh_token(refresh_token)
        except RefreshTokenNotFound:
            return AuthResult.failed(AuthError.INVALID_TOKEN)
        if not current.is_usable(now):
            return AuthResult.failed(AuthError.INVALID_TOKEN)

        try:
            user = self.store.get_user_by_id(current.user_id)
        except UserNotFound:
            return AuthResult.failed(AuthError.USER_NOT_FOUND)
        if current.user_version != user.version:
            logger.warning(
                "Refresh token predates password change: token_id=%s, token_version=%s, user_version=%s",
                current.id,
                current.user_version,
                user.version,
            )
            return AuthResult.failed(AuthError.INVALID_TOKEN)

        access_token = self._sign(user)
        replacement = self._new_refresh_token(user, now)
        try:
            self.store.rotate_refresh_token(current.id, replacement)
        except (RefreshTokenRevoked, RefreshTokenNotFound):
            logger.warning("Refresh token reuse rejected: token_id=%s, user_id=%s", current.id, user.id)
            return AuthResult.failed(AuthError.INVALID_TOKEN)

        return AuthResult(tokens=TokenPair(access_token, replacement.token))

    def validate(self, access_token: str) -> ValidationResult:
        try:
            claims = self.signer.parse(access_token)
        except InvalidAccessToken:
            return ValidationResult(error=AuthError.INVALID_TOKEN)

        try:
            user = self.store.get_user_by_login(claims.login)
        except UserNotFound:
            return ValidationResult(error=AuthError.USER_NOT_FOUND)
        if user.version != claims.version:
            return ValidationResult(error=AuthError.STALE_TOKEN)
        return ValidationResult()

    def authenticate_external(self, assertion: str) -> AuthResult:
        """
        Log in with a third-party identity assertion. Unknown emails get an
        account with password login disabled.
        """
        try:
            email = self.identity_verifier.verify(assertion)
        except ExternalIdentityError as e:
            logger.warning("External identity rejected: %s", e.message)
            return AuthResult.failed(AuthError.INVALID_TOKEN)

        try:
            user = self.store.get_user_by_login(email)
        except UserNotFound:
            user = self._provision_external_user(email)

        return AuthResult(tokens=self._issue_tokens(user))

    def create_group(self, name: str, description: str) -> str:
        return self.store.create_group(name, description)

    def create_permission(self, name: str, description: str) -> str:
        return self.store.create_permission(name, description)

    def create_scope(self, name: str, description: str) -> str:
        return self.store.create_scope(name, description)

    def _provision_external_user(self, email: str) -> User:
        try:
            user = self.store.create_user(email, None, password_login_enabled=False)
        except LoginTaken:
            # Lost a race with a concurrent first login for the same email.
            return self.store.get_user_by_login(email)
        logger.info("Provisioned user from external identity: user_id=%s", user.id)
        return user

    def _get_dummy_digest(self) -> str:
        if self._dummy_digest is None:
            self._dummy_digest = self.hasher.hash(secrets.token_urlsafe(16))
        return self._dummy_digest

    def _sign(self, user: User) -> str:
        return self.signer.issue(user.id, user.login, user.version, user.groups)

    def _new_refresh_token(self, user: User, now: datetime) -> RefreshToken:
        return RefreshToken(
            id=str(uuid.uuid4()),
            user_id=user.id,
            token=secrets.token_urlsafe(REFRESH_TOKEN_BYTES),
            user_version=user.version,
            issued_at=now,
            expires_at=now + self.refresh_ttl,
        )

    def _issue_tokens(self, user: User) -> TokenPair:
        access_token = self._sign(user)
        refresh = self.store.create_refresh_token(self._new_refresh_token(user, self._clock()))
        return TokenPair(access_token, refresh.token)
