"""Password hashing and JWT access token issuance/verification."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Iterable, Protocol

import bcrypt
import jwt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Claims every access token must carry.
REQUIRED_CLAIMS = ["exp", "iat", "uid", "login", "user_ver"]

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, digest: str, password: str) -> bool: ...


class BcryptPasswordHasher:
    """bcrypt-backed PasswordHasher. checkpw compares in constant time."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        # bcrypt has a 72-byte limit; truncate to avoid errors.
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, digest: str, password: str) -> bool:
        pw_bytes = password.encode("utf-8")[:72]
        try:
            return bcrypt.checkpw(pw_bytes, digest.encode("utf-8"))
        except (ValueError, TypeError):
            return False


class InvalidAccessToken(Exception):
    """Raised when an access token fails signature, algorithm, expiry or claim checks."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


@dataclass(frozen=True)
class AccessClaims:
    """Identity and version snapshot embedded in an access token."""

    user_id: str
    login: str
    version: int
    groups: frozenset[str] = field(default_factory=frozenset)
    issued_at: datetime | None = None
    expires_at: datetime | None = None


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenSigner:
    """
    Issues and parses HMAC-signed JWT access tokens.

    parse() only checks the token itself (signature, algorithm, expiry, claim
    shape). Comparing the version claim against the store is left to the caller.
    """

    def __init__(
        self,
        secret: str,
        ttl: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("signing secret must be non-empty")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"unsupported signing algorithm: {algorithm}")
        if ttl <= timedelta(0):
            raise ValueError("access token ttl must be positive")
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, user_id: str, login: str, version: int, groups: Iterable[str]) -> str:
        now = self._clock()
        payload: dict[str, Any] = {
            "uid": user_id,
            "login": login,
            "user_ver": version,
            "groups": sorted(groups),
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def parse(self, token: str) -> AccessClaims:
        """
        Decode and validate a token; return its claims.
        Raises InvalidAccessToken on bad signature, foreign algorithm, expiry or malformed claims.
        """
        if not token:
            raise InvalidAccessToken("empty token")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as e:
            raise InvalidAccessToken(str(e), cause=e) from e

        uid = payload.get("uid")
        login = payload.get("login")
        version = payload.get("user_ver")
        groups = payload.get("groups") or []
        if not isinstance(uid, str) or not isinstance(login, str):
            raise InvalidAccessToken("invalid identity claims")
        if isinstance(version, bool) or not isinstance(version, int):
            raise InvalidAccessToken("invalid version claim")
        if not isinstance(groups, list) or not all(isinstance(g, str) for g in groups):
            raise InvalidAccessToken("invalid groups claim")
        return AccessClaims(
            user_id=uid,
            login=login,
            version=version,
            groups=frozenset(groups),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
