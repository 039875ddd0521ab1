"""API v1 routes."""

from fastapi import APIRouter

from adminauth.api.v1 import auth, catalog, health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
