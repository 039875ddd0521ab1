"""Create-only catalog endpoints for groups, permissions and scopes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from adminauth.api.deps import get_manager
from adminauth.schemas.catalog import CatalogCreateRequest, CatalogCreateResponse
from adminauth.services.credentials import CredentialLifecycleManager

router = APIRouter()

Manager = Annotated[CredentialLifecycleManager, Depends(get_manager)]


@router.post("/groups", response_model=CatalogCreateResponse)
def create_group(body: CatalogCreateRequest, manager: Manager) -> CatalogCreateResponse:
    return CatalogCreateResponse(id=manager.create_group(body.name, body.description))


@router.post("/permissions", response_model=CatalogCreateResponse)
def create_permission(body: CatalogCreateRequest, manager: Manager) -> CatalogCreateResponse:
    return CatalogCreateResponse(id=manager.create_permission(body.name, body.description))


@router.post("/scopes", response_model=CatalogCreateResponse)
def create_scope(body: CatalogCreateRequest, manager: Manager) -> CatalogCreateResponse:
    return CatalogCreateResponse(id=manager.create_scope(body.name, body.description))
