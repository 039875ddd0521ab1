"""Credential lifecycle endpoints: register, login, password change, refresh, validate, external login."""

from typing import Annotated

from fastapi import APIRouter, Depends

from adminauth.api.deps import get_manager
from adminauth.schemas.auth import (
    CredentialsRequest,
    ExternalAuthRequest,
    RefreshRequest,
    TokenPairResponse,
    UpdatePasswordRequest,
    ValidateRequest,
    ValidateResponse,
)
from adminauth.services.credentials import CredentialLifecycleManager

router = APIRouter()

Manager = Annotated[CredentialLifecycleManager, Depends(get_manager)]


@router.post("/register", response_model=TokenPairResponse)
def register(body: CredentialsRequest, manager: Manager) -> TokenPairResponse:
    """Create a user and return its first token pair."""
    return TokenPairResponse.from_result(manager.register(body.login, body.password))


@router.post("/authenticate", response_model=TokenPairResponse)
def authenticate(body: CredentialsRequest, manager: Manager) -> TokenPairResponse:
    """
    Authenticate with login and password; returns a JWT access token and a refresh token.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    return TokenPairResponse.from_result(manager.authenticate(body.login, body.password))


@router.post("/password", response_model=TokenPairResponse)
def update_password(body: UpdatePasswordRequest, manager: Manager) -> TokenPairResponse:
    """Change a password. Every token issued before the change stops working."""
    return TokenPairResponse.from_result(manager.update_password(body.login, body.new_password))


@router.post("/refresh", response_model=TokenPairResponse)
def refresh(body: RefreshRequest, manager: Manager) -> TokenPairResponse:
    """Exchange a refresh token for a new pair; the presented token cannot be used again."""
    return TokenPairResponse.from_result(manager.refresh(body.refresh_token))


@router.post("/validate", response_model=ValidateResponse)
def validate(body: ValidateRequest, manager: Manager) -> ValidateResponse:
    return ValidateResponse(error=manager.validate(body.access_token).error)


@router.post("/external", response_model=TokenPairResponse)
def authenticate_external(body: ExternalAuthRequest, manager: Manager) -> TokenPairResponse:
    """Log in with a Google ID token; first login creates the account."""
    return TokenPairResponse.from_result(manager.authenticate_external(body.id_token))
