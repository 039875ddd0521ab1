"""Pydantic request/response schemas."""

from adminauth.schemas.auth import (
    CredentialsRequest,
    ExternalAuthRequest,
    RefreshRequest,
    TokenPairResponse,
    UpdatePasswordRequest,
    ValidateRequest,
    ValidateResponse,
)
from adminauth.schemas.catalog import CatalogCreateRequest, CatalogCreateResponse
from adminauth.schemas.health import HealthResponse

__all__ = [
    "CatalogCreateRequest",
    "CatalogCreateResponse",
    "CredentialsRequest",
    "ExternalAuthRequest",
    "HealthResponse",
    "RefreshRequest",
    "TokenPairResponse",
    "UpdatePasswordRequest",
    "ValidateRequest",
    "ValidateResponse",
]
