"""Wiring of the credential lifecycle manager and its FastAPI dependency."""

import logging
from datetime import timedelta

from fastapi import Request

from adminauth.core.config import Settings
from adminauth.core.database import build_engine, build_session_factory
from adminauth.core.security import BcryptPasswordHasher, TokenSigner
from adminauth.models import Base
from adminauth.services.credentials import CredentialLifecycleManager
from adminauth.services.identity import GoogleIdTokenVerifier
from adminauth.storage.base import CredentialStore
from adminauth.storage.memory import MemoryCredentialStore
from adminauth.storage.sql import SqlCredentialStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> CredentialStore:
    """Create the configured store backend. SQL tables are created if missing."""
    if settings.STORE_BACKEND == "sql":
        engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        Base.metadata.create_all(engine)
        logger.info("Using SQL credential store: dialect=%s", engine.dialect.name)
        return SqlCredentialStore(build_session_factory(engine))
    logger.info("Using in-memory credential store (state is lost on restart)")
    return MemoryCredentialStore()


def build_manager(settings: Settings, store: CredentialStore | None = None) -> CredentialLifecycleManager:
    signer = TokenSigner(
        secret=settings.JWT_SECRET.get_secret_value(),
        ttl=timedelta(seconds=settings.JWT_TTL_SECONDS),
        algorithm=settings.JWT_ALGORITHM,
    )
    return CredentialLifecycleManager(
        store=store if store is not None else build_store(settings),
        signer=signer,
        hasher=BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        identity_verifier=GoogleIdTokenVerifier.from_settings(settings),
        refresh_ttl=timedelta(seconds=settings.REFRESH_TTL_SECONDS),
    )


def get_manager(request: Request) -> CredentialLifecycleManager:
    """Dependency: the manager created at application startup."""
    return request.app.state.manager
