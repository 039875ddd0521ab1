"""Errors raised by credential store backends."""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base class for store failures. Carries a message and optional detail."""

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class LoginTaken(StoreError):
    """A user with the requested login already exists."""


class UserNotFound(StoreError):
    pass


class RefreshTokenNotFound(StoreError):
    pass


class RefreshTokenRevoked(StoreError):
    """Rotation was attempted on a refresh token that is already revoked."""


class DuplicateRefreshToken(StoreError):
    """A refresh token value collided with one issued before."""


class CatalogRecordNotFound(StoreError):
    pass


__all__ = [
    "CatalogRecordNotFound",
    "DuplicateRefreshToken",
    "LoginTaken",
    "RefreshTokenNotFound",
    "RefreshTokenRevoked",
    "StoreError",
    "UserNotFound",
]
