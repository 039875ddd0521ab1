"""SQLAlchemy ORM models."""

from adminauth.models.base import Base
from adminauth.models.catalog import GroupRow, PermissionRow, ScopeRow
from adminauth.models.refresh_token import RefreshTokenRow
from adminauth.models.user import UserRow

__all__ = ["Base", "GroupRow", "PermissionRow", "RefreshTokenRow", "ScopeRow", "UserRow"]
