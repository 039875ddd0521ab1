"""Contract every credential store backend satisfies."""

from __future__ import annotations

from typing import Iterable, Protocol

from adminauth.storage.records import CatalogRecord, RefreshToken, User


class CredentialStore(Protocol):
    """
    Users, refresh tokens and catalog records.

    All methods are safe to call from concurrent request threads. Reads return
    independent copies; writes are atomic per call. Lookup misses raise the
    matching StoreError subclass.
    """

    # users
    def create_user(
        self,
        login: str,
        password_digest: str | None,
        *,
        password_login_enabled: bool = True,
        groups: Iterable[str] = (),
    ) -> User: ...

    def get_user_by_login(self, login: str) -> User: ...

    def get_user_by_id(self, user_id: str) -> User: ...

    def update_user(self, user: User) -> User: ...

    def change_password(self, login: str, password_digest: str) -> User: ...

    # refresh tokens
    def create_refresh_token(self, token: RefreshToken) -> RefreshToken: ...

    def get_refresh_token(self, value: str) -> RefreshToken: ...

    def revoke_refresh_token(self, token_id: str) -> None: ...

    def revoke_all_refresh_tokens_for_user(self, user_id: str) -> int: ...

    def rotate_refresh_token(
        self, old_token_id: str, new_token: RefreshToken
    ) -> RefreshToken: ...

    # catalog
    def create_group(self, name: str, description: str) -> str: ...

    def create_permission(self, name: str, description: str) -> str: ...

    def create_scope(self, name: str, description: str) -> str: ...

    def get_group(self, group_id: str) -> CatalogRecord: ...

    def get_permission(self, permission_id: str) -> CatalogRecord: ...

    def get_scope(self, scope_id: str) -> CatalogRecord: ...
