"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI

from adminauth.api.deps import build_manager
from adminauth.api.v1 import router as v1_router
from adminauth.core.config import LOG_DATE_FORMAT, LOG_FORMAT, Settings, get_settings
from adminauth.services.credentials import CredentialLifecycleManager

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt=LOG_DATE_FORMAT,
)


def create_app(
    settings: Settings | None = None,
    manager: CredentialLifecycleManager | None = None,
) -> FastAPI:
    """Build the application around one explicitly constructed manager."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Admin Auth API",
        version="0.1.0",
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url="/redoc" if settings.APP_ENV == "dev" else None,
    )
    app.state.settings = settings
    app.state.manager = manager if manager is not None else build_manager(settings)
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Admin Auth API"}

    return app


app = create_app()
