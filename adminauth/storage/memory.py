"""Thread-safe in-memory credential store for tests and local development."""

from __future__ import annotations

import threading
import uuid
from typing import Iterable

from adminauth.storage.errors import (
    CatalogRecordNotFound,
    DuplicateRefreshToken,
    LoginTaken,
    RefreshTokenNotFound,
    RefreshTokenRevoked,
    UserNotFound,
)
from adminauth.storage.records import CatalogRecord, RefreshToken, User, utcnow


class MemoryCredentialStore:
    """
    Volatile store keeping every record in dicts.

    Users, refresh tokens and the catalog each have their own lock so that token
    traffic does not contend with user writes. The locks are plain re-entrant
    mutexes, so concurrent reads within one table family are serialized too.
    Stored objects never leave the store: callers always receive copies.
    """

    def __init__(self) -> None:
        self._users_lock = threading.RLock()
        self._tokens_lock = threading.RLock()
        self._catalog_lock = threading.RLock()

        self._users_by_login: dict[str, User] = {}
        self._users_by_id: dict[str, User] = {}

        self._tokens_by_value: dict[str, RefreshToken] = {}
        self._tokens_by_id: dict[str, RefreshToken] = {}
        self._token_ids_by_user: dict[str, set[str]] = {}

        self._groups: dict[str, CatalogRecord] = {}
        self._permissions: dict[str, CatalogRecord] = {}
        self._scopes: dict[str, CatalogRecord] = {}

    # users
    def create_user(
        self,
        login: str,
        password_digest: str | None,
        *,
        password_login_enabled: bool = True,
        groups: Iterable[str] = (),
    ) -> User:
        with self._users_lock:
            if login in self._users_by_login:
                raise LoginTaken("login already in use", {"login": login})
            now = utcnow()
            user = User(
                id=str(uuid.uuid4()),
                login=login,
                password_digest=password_digest,
                version=1,
                password_login_enabled=password_login_enabled,
                groups=set(groups),
                created_at=now,
                updated_at=now,
            )
            self._users_by_login[login] = user
            self._users_by_id[user.id] = user
            return user.copy()

    def get_user_by_login(self, login: str) -> User:
        with self._users_lock:
            user = self._users_by_login.get(login)
            if user is None:
                raise UserNotFound("user not found", {"login": login})
            return user.copy()

    def get_user_by_id(self, user_id: str) -> User:
        with self._users_lock:
            user = self._users_by_id.get(user_id)
            if user is None:
                raise UserNotFound("user not found", {"user_id": user_id})
            return user.copy()

    def update_user(self, user: User) -> User:
        with self._users_lock:
            current = self._users_by_login.get(user.login)
            if current is None and user.id:
                current = self._users_by_id.get(user.id)
            if current is None:
                raise UserNotFound("user not found", {"login": user.login})
            current.password_digest = user.password_digest
            current.password_login_enabled = user.password_login_enabled
            current.version = user.version
            current.groups = set(user.groups)
            current.updated_at = utcnow()
            return current.copy()

    def change_password(self, login: str, password_digest: str) -> User:
        with self._users_lock:
            current = self._users_by_login.get(login)
            if current is None:
                raise UserNotFound("user not found", {"login": login})
            current.password_digest = password_digest
            current.password_login_enabled = True
            current.version += 1
            current.updated_at = utcnow()
            return current.copy()

    # refresh tokens
    def _insert_token(self, token: RefreshToken) -> RefreshToken:
        if not token.id:
            token.id = str(uuid.uuid4())
        if token.token in self._tokens_by_value or token.id in self._tokens_by_id:
            raise DuplicateRefreshToken("refresh token already issued", {"id": token.id})
        stored = token.copy()
        self._tokens_by_value[stored.token] = stored
        self._tokens_by_id[stored.id] = stored
        self._token_ids_by_user.setdefault(stored.user_id, set()).add(stored.id)
        return stored.copy()

    def create_refresh_token(self, token: RefreshToken) -> RefreshToken:
        with self._tokens_lock:
            return self._insert_token(token)

    def get_refresh_token(self, value: str) -> RefreshToken:
        with self._tokens_lock:
            token = self._tokens_by_value.get(value)
            if token is None:
                raise RefreshTokenNotFound("refresh token not found")
            return token.copy()

    def revoke_refresh_token(self, token_id: str) -> None:
        with self._tokens_lock:
            token = self._tokens_by_id.get(token_id)
            if token is not None:
                token.revoked = True

    def revoke_all_refresh_tokens_for_user(self, user_id: str) -> int:
        with self._tokens_lock:
            revoked = 0
            for token_id in self._token_ids_by_user.get(user_id, ()):
                token = self._tokens_by_id[token_id]
                if not token.revoked:
                    token.revoked = True
                    revoked += 1
            return revoked

    def rotate_refresh_token(
        self, old_token_id: str, new_token: RefreshToken
    ) -> RefreshToken:
        with self._tokens_lock:
            old = self._tokens_by_id.get(old_token_id)
            if old is None:
                raise RefreshTokenNotFound("refresh token not found", {"id": old_token_id})
            if old.revoked:
                raise RefreshTokenRevoked("refresh token already revoked", {"id": old_token_id})
            # Insert first: a duplicate value must leave the old token untouched.
            stored = self._insert_token(new_token)
            old.revoked = True
            return stored

    # catalog
    def _create_catalog_record(
        self, table: dict[str, CatalogRecord], name: str, description: str
    ) -> str:
        with self._catalog_lock:
            record = CatalogRecord(id=str(uuid.uuid4()), name=name, description=description)
            table[record.id] = record
            return record.id

    def _get_catalog_record(
        self, table: dict[str, CatalogRecord], record_id: str, kind: str
    ) -> CatalogRecord:
        with self._catalog_lock:
            record = table.get(record_id)
            if record is None:
                raise CatalogRecordNotFound(f"{kind} not found", {"id": record_id})
            return record.copy()

    def create_group(self, name: str, description: str) -> str:
        return self._create_catalog_record(self._groups, name, description)

    def create_permission(self, name: str, description: str) -> str:
        return self._create_catalog_record(self._permissions, name, description)

    def create_scope(self, name: str, description: str) -> str:
        return self._create_catalog_record(self._scopes, name, description)

    def get_group(self, group_id: str) -> CatalogRecord:
        return self._get_catalog_record(self._groups, group_id, "group")

    def get_permission(self, permission_id: str) -> CatalogRecord:
        return self._get_catalog_record(self._permissions, permission_id, "permission")

    def get_scope(self, scope_id: str) -> CatalogRecord:
        return self._get_catalog_record(self._scopes, scope_id, "scope")
