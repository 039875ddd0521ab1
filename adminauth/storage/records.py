"""Plain records handed across the store boundary (users, refresh tokens, catalog)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class User:
    """
    Administrative user.

    password_digest is None and password_login_enabled is False for accounts
    provisioned through an external identity provider.
    """

    id: str
    login: str
    password_digest: str | None
    version: int = 1
    password_login_enabled: bool = True
    groups: set[str] = field(default_factory=set)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def copy(self) -> "User":
        return replace(self, groups=set(self.groups))


@dataclass
class RefreshToken:
    """Opaque rotating credential. Usable while not revoked and not expired."""

    id: str
    user_id: str
    token: str
    expires_at: datetime
    user_version: int = 1
    issued_at: datetime = field(default_factory=utcnow)
    revoked: bool = False

    def copy(self) -> "RefreshToken":
        return replace(self)

    def is_usable(self, now: datetime) -> bool:
        return not self.revoked and now < self.expires_at


@dataclass
class CatalogRecord:
    """Group, permission or scope entry."""

    id: str
    name: str
    description: str
    created_at: datetime = field(default_factory=utcnow)

    def copy(self) -> "CatalogRecord":
        return replace(self)
