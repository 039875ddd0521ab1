"""Credential lifecycle and external identity services."""

from adminauth.services.credentials import (
    AuthError,
    AuthResult,
    CredentialLifecycleManager,
    TokenPair,
    ValidationResult,
)
from adminauth.services.identity import (
    ExternalIdentityError,
    ExternalIdentityVerifier,
    GoogleIdTokenVerifier,
)

__all__ = [
    "AuthError",
    "AuthResult",
    "CredentialLifecycleManager",
    "ExternalIdentityError",
    "ExternalIdentityVerifier",
    "GoogleIdTokenVerifier",
    "TokenPair",
    "ValidationResult",
]
