"""Credential store contract and backends."""

from adminauth.storage.base import CredentialStore
from adminauth.storage.errors import (
    CatalogRecordNotFound,
    DuplicateRefreshToken,
    LoginTaken,
    RefreshTokenNotFound,
    RefreshTokenRevoked,
    StoreError,
    UserNotFound,
)
from adminauth.storage.memory import MemoryCredentialStore
from adminauth.storage.records import CatalogRecord, RefreshToken, User
from adminauth.storage.sql import SqlCredentialStore

__all__ = [
    "CatalogRecord",
    "CatalogRecordNotFound",
    "CredentialStore",
    "DuplicateRefreshToken",
    "LoginTaken",
    "MemoryCredentialStore",
    "RefreshToken",
    "RefreshTokenNotFound",
    "RefreshTokenRevoked",
    "SqlCredentialStore",
    "StoreError",
    "User",
    "UserNotFound",
]
