"""ORM model for rotating refresh tokens."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from adminauth.models.base import Base


class RefreshTokenRow(Base):
    """Opaque refresh token. Rows are revoked, never deleted."""

    __tablename__ = "refresh_tokens"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(255), nullable=False, unique=True, index=True)
    user_version = Column(Integer, nullable=False, default=1)
    issued_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked = Column(Boolean, nullable=False, default=False)
