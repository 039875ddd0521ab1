"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
)

# Only HMAC algorithms: the signing key is a shared secret.
VALID_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")

DEFAULT_JWT_SECRET = "dev_insecure_change_me"

# Log timestamps are local time with an explicit UTC offset.
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Credential store: "memory" is volatile; "sql" uses DATABASE_URL
    STORE_BACKEND: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str = "sqlite:///./adminauth.db"

    # Access tokens (JWT)
    JWT_SECRET: SecretStr = SecretStr(DEFAULT_JWT_SECRET)
    JWT_ALGORITHM: str = "HS256"
    JWT_TTL_SECONDS: int = 900

    # Refresh tokens: 14 days
    REFRESH_TTL_SECONDS: int = 14 * 24 * 3600

    # Bcrypt cost (rounds)
    BCRYPT_ROUNDS: int = 12

    # Google sign-in (optional; external login fails while unset)
    GOOGLE_OAUTH_CLIENT_ID: str | None = None
    GOOGLE_TOKENINFO_URL: str = "https://oauth2.googleapis.com/tokeninfo"
    GOOGLE_REQUEST_TIMEOUT_SEC: float = 10.0

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        v = v.strip()
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:/// or postgresql://)"
            )
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        v = (v or "").strip().upper()
        if v not in VALID_JWT_ALGORITHMS:
            raise ValueError(
                f"JWT_ALGORITHM must be one of {', '.join(VALID_JWT_ALGORITHMS)}"
            )
        return v

    @field_validator("JWT_TTL_SECONDS")
    @classmethod
    def validate_jwt_ttl(cls, v: int) -> int:
        if v < 1 or v > 604800:
            raise ValueError(
                "JWT_TTL_SECONDS must be between 1 and 604800 (1 second to 7 days)"
            )
        return v

    @field_validator("REFRESH_TTL_SECONDS")
    @classmethod
    def validate_refresh_ttl(cls, v: int) -> int:
        if v < 1 or v > 90 * 24 * 3600:
            raise ValueError("REFRESH_TTL_SECONDS must be between 1 and 7776000 (90 days)")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 16:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 16")
        return v

    @field_validator("GOOGLE_OAUTH_CLIENT_ID")
    @classmethod
    def validate_google_client_id(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("GOOGLE_TOKENINFO_URL")
    @classmethod
    def validate_google_tokeninfo_url(cls, v: str) -> str:
        s = (v or "").strip().lower()
        if not (s.startswith("http://") or s.startswith("https://")):
            raise ValueError(
                "GOOGLE_TOKENINFO_URL must use http or https (e.g. https://oauth2.googleapis.com/tokeninfo)"
            )
        return v.strip()

    @field_validator("GOOGLE_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_google_timeout(cls, v: float) -> float:
        if v <= 0 or v > 60:
            raise ValueError(
                "GOOGLE_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 60"
            )
        return v

    @model_validator(mode="after")
    def validate_token_lifetimes(self) -> "Settings":
        if self.REFRESH_TTL_SECONDS <= self.JWT_TTL_SECONDS:
            raise ValueError("REFRESH_TTL_SECONDS must be greater than JWT_TTL_SECONDS")
        if self.APP_ENV == "prod" and self.JWT_SECRET.get_secret_value() == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be changed from the default in prod")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
