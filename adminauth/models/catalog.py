"""ORM models for the group, permission and scope catalogs."""

from sqlalchemy import Column, DateTime, String, Text, func

from adminauth.models.base import Base


class _CatalogColumns:
    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class GroupRow(_CatalogColumns, Base):
    __tablename__ = "groups"


class PermissionRow(_CatalogColumns, Base):
    __tablename__ = "permissions"


class ScopeRow(_CatalogColumns, Base):
    __tablename__ = "scopes"
