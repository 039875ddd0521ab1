"""ORM model for administrative users."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, func

from adminauth.models.base import Base


class UserRow(Base):
    """
    User account backing password and external-identity login.

    version increases by one on every password change; access tokens carry a
    snapshot of it. password_hash is NULL when password login is disabled.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    login = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)
    password_login_enabled = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, nullable=False, default=1)
    groups = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
