"""Request/response schemas for catalog (group/permission/scope) endpoints."""

from pydantic import BaseModel, Field


class CatalogCreateRequest(BaseModel):
    name: str = Field(..., max_length=255, description="Display name")
    description: str = Field(default="", description="Free-form description")


class CatalogCreateResponse(BaseModel):
    id: str = Field(..., description="Identifier of the created record")
