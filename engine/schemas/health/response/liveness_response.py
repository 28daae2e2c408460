"""Liveness response schema."""

from pydantic import Field

from engine.schemas.base_schema_model import BaseSchemaModel


class LivenessResponse(BaseSchemaModel):
    """Process is up; no dependency is consulted."""

    status: str = Field("alive", description="Liveness status")
    service: str = Field(..., description="Service name")
