"""SQLAlchemy-backed credential store (same contract as the in-memory store)."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from adminauth.core.database import check_db_connected
from adminauth.models import GroupRow, PermissionRow, RefreshTokenRow, ScopeRow, UserRow
from adminauth.storage.errors import (
    CatalogRecordNotFound,
    DuplicateRefreshToken,
    LoginTaken,
    RefreshTokenNotFound,
    RefreshTokenRevoked,
    UserNotFound,
)
from adminauth.storage.records import CatalogRecord, RefreshToken, User, utcnow


def _aware(dt: datetime) -> datetime:
    # SQLite drops tzinfo; every stored timestamp is UTC.
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        login=row.login,
        password_digest=row.password_hash,
        version=row.version,
        password_login_enabled=row.password_login_enabled,
        groups=set(row.groups or []),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _to_refresh_token(row: RefreshTokenRow) -> RefreshToken:
    return RefreshToken(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        user_version=row.user_version,
        issued_at=_aware(row.issued_at),
        expires_at=_aware(row.expires_at),
        revoked=row.revoked,
    )


def _to_refresh_row(token: RefreshToken) -> RefreshTokenRow:
    return RefreshTokenRow(
        id=token.id,
        user_id=token.user_id,
        token=token.token,
        user_version=token.user_version,
        issued_at=token.issued_at,
        expires_at=token.expires_at,
        revoked=token.revoked,
    )


class SqlCredentialStore:
    """
    Durable store over SQLAlchemy sessions.

    Uniqueness of logins and token values comes from unique indexes; version
    increments and rotation are single UPDATE statements guarded in the WHERE
    clause, so concurrent writers cannot both win.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def check_connection(self) -> bool:
        return check_db_connected(self._session_factory)

    # users
    def create_user(
        self,
        login: str,
        password_digest: str | None,
        *,
        password_login_enabled: bool = True,
        groups: Iterable[str] = (),
    ) -> User:
        now = utcnow()
        row = UserRow(
            id=str(uuid.uuid4()),
            login=login,
            password_hash=password_digest,
            password_login_enabled=password_login_enabled,
            version=1,
            groups=sorted(set(groups)),
            created_at=now,
            updated_at=now,
        )
        try:
            with self._session_factory() as db, db.begin():
                db.add(row)
                db.flush()
                return _to_user(row)
        except IntegrityError as e:
            raise LoginTaken("login already in use", {"login": login}) from e

    def get_user_by_login(self, login: str) -> User:
        with self._session_factory() as db:
            row = db.scalars(select(UserRow).where(UserRow.login == login)).first()
            if row is None:
                raise UserNotFound("user not found", {"login": login})
            return _to_user(row)

    def get_user_by_id(self, user_id: str) -> User:
        with self._session_factory() as db:
            row = db.get(UserRow, user_id)
            if row is None:
                raise UserNotFound("user not found", {"user_id": user_id})
            return _to_user(row)

    def update_user(self, user: User) -> User:
        with self._session_factory() as db, db.begin():
            row = db.scalars(select(UserRow).where(UserRow.login == user.login)).first()
            if row is None and user.id:
                row = db.get(UserRow, user.id)
            if row is None:
                raise UserNotFound("user not found", {"login": user.login})
            row.password_hash = user.password_digest
            row.password_login_enabled = user.password_login_enabled
            row.version = user.version
            row.groups = sorted(user.groups)
            row.updated_at = utcnow()
            db.flush()
            return _to_user(row)

    def change_password(self, login: str, password_digest: str) -> User:
        with self._session_factory() as db, db.begin():
            result = db.execute(
                update(UserRow)
                .where(UserRow.login == login)
                .values(
                    password_hash=password_digest,
                    password_login_enabled=True,
                    version=UserRow.version + 1,
                    updated_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise UserNotFound("user not found", {"login": login})
            row = db.scalars(select(UserRow).where(UserRow.login == login)).one()
            return _to_user(row)

    # refresh tokens
    def create_refresh_token(self, token: RefreshToken) -> RefreshToken:
        if not token.id:
            token.id = str(uuid.uuid4())
        try:
            with self._session_factory() as db, db.begin():
                row = _to_refresh_row(token)
                db.add(row)
                db.flush()
                return _to_refresh_token(row)
        except IntegrityError as e:
            raise DuplicateRefreshToken("refresh token already issued", {"id": token.id}) from e

    def get_refresh_token(self, value: str) -> RefreshToken:
        with self._session_factory() as db:
            row = db.scalars(select(RefreshTokenRow).where(RefreshTokenRow.token == value)).first()
            if row is None:
                raise RefreshTokenNotFound("refresh token not found")
            return _to_refresh_token(row)

    def revoke_refresh_token(self, token_id: str) -> None:
        with self._session_factory() as db, db.begin():
            db.execute(
                update(RefreshTokenRow)
                .where(RefreshTokenRow.id == token_id)
                .values(revoked=True)
                .execution_options(synchronize_session=False)
            )

    def revoke_all_refresh_tokens_for_user(self, user_id: str) -> int:
        with self._session_factory() as db, db.begin():
            result = db.execute(
                update(RefreshTokenRow)
                .where(RefreshTokenRow.user_id == user_id, RefreshTokenRow.revoked.is_(False))
                .values(revoked=True)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

    def rotate_refresh_token(
        self, old_token_id: str, new_token: RefreshToken
    ) -> RefreshToken:
        if not new_token.id:
            new_token.id = str(uuid.uuid4())
        try:
            with self._session_factory() as db, db.begin():
                result = db.execute(
                    update(RefreshTokenRow)
                    .where(RefreshTokenRow.id == old_token_id, RefreshTokenRow.revoked.is_(False))
                    .values(revoked=True)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    if db.get(RefreshTokenRow, old_token_id) is None:
                        raise RefreshTokenNotFound("refresh token not found", {"id": old_token_id})
                    raise RefreshTokenRevoked("refresh token already revoked", {"id": old_token_id})
                row = _to_refresh_row(new_token)
                db.add(row)
                db.flush()
                return _to_refresh_token(row)
        except IntegrityError as e:
            raise DuplicateRefreshToken("refresh token already issued", {"id": new_token.id}) from e

    # catalog
    def _create_catalog_record(self, model: type, name: str, description: str) -> str:
        record_id = str(uuid.uuid4())
        with self._session_factory() as db, db.begin():
            db.add(model(id=record_id, name=name, description=description, created_at=utcnow()))
        return record_id

    def _get_catalog_record(self, model: type, record_id: str, kind: str) -> CatalogRecord:
        with self._session_factory() as db:
            row = db.get(model, record_id)
            if row is None:
                raise CatalogRecordNotFound(f"{kind} not found", {"id": record_id})
            return CatalogRecord(
                id=row.id,
                name=row.name,
                description=row.description,
                created_at=_aware(row.created_at),
            )

    def create_group(self, name: str, description: str) -> str:
        return self._create_catalog_record(GroupRow, name, description)

    def create_permission(self, name: str, description: str) -> str:
        return self._create_catalog_record(PermissionRow, name, description)

    def create_scope(self, name: str, description: str) -> str:
        return self._create_catalog_record(ScopeRow, name, description)

    def get_group(self, group_id: str) -> CatalogRecord:
        return self._get_catalog_record(GroupRow, group_id, "group")

    def get_permission(self, permission_id: str) -> CatalogRecord:
        return self._get_catalog_record(PermissionRow, permission_id, "permission")

    def get_scope(self, scope_id: str) -> CatalogRecord:
        return self._get_catalog_record(ScopeRow, scope_id, "scope")
