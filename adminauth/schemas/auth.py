"""Request/response schemas for credential endpoints."""

from pydantic import BaseModel, Field

from adminauth.services.credentials import AuthError, AuthResult


class CredentialsRequest(BaseModel):
    """Login and password for register/authenticate."""

    login: str = Field(..., max_length=320, description="Login (case-sensitive)")
    password: str = Field(..., max_length=128, description="Password")


class UpdatePasswordRequest(BaseModel):
    login: str = Field(..., max_length=320, description="Login of the user to update")
    new_password: str = Field(..., max_length=128, description="New password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., max_length=512, description="Opaque refresh token")


class ValidateRequest(BaseModel):
    access_token: str = Field(..., max_length=8192, description="JWT access token")


class ExternalAuthRequest(BaseModel):
    """Identity assertion from the external provider (Google ID token)."""

    id_token: str = Field(..., max_length=8192, description="Google ID token")


class TokenPairResponse(BaseModel):
    """Token pair on success; error set (and tokens null) on an expected failure."""

    access_token: str | None = Field(default=None, description="JWT access token")
    refresh_token: str | None = Field(default=None, description="Opaque refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    error: AuthError | None = Field(default=None, description="Failure code")

    @classmethod
    def from_result(cls, result: AuthResult) -> "TokenPairResponse":
        if result.tokens is None:
            return cls(error=result.error)
        return cls(
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
        )


class ValidateResponse(BaseModel):
    """Empty on success; error set when the token is rejected."""

    error: AuthError | None = Field(default=None, description="Failure code")
