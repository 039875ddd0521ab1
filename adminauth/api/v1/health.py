"""Health check endpoint with optional database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from adminauth.api.deps import get_manager
from adminauth.schemas.health import HealthResponse
from adminauth.services.credentials import CredentialLifecycleManager
from adminauth.storage.sql import SqlCredentialStore

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    request: Request,
    manager: Annotated[CredentialLifecycleManager, Depends(get_manager)],
) -> HealthResponse:
    """
    Return service health status, the store backend and database connectivity.
    Used by load balancers and monitoring.
    """
    manager.ping()
    store = manager.store
    if isinstance(store, SqlCredentialStore):
        return HealthResponse(
            status="ok",
            environment=request.app.state.settings.APP_ENV,
            store="sql",
            database="connected" if store.check_connection() else "disconnected",
        )
    return HealthResponse(
        status="ok",
        environment=request.app.state.settings.APP_ENV,
        store="memory",
    )
