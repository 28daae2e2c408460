"""Readiness response schema."""

from pydantic import Field

from engine.schemas.base_schema_model import BaseSchemaModel
from engine.schemas.health.dependency_health import DependencyHealth


class ReadinessResponse(BaseSchemaModel):
    """Readiness of the service and of each dependency.

    The service stays ready while degraded: without a database or loaded
    engine state it still accepts requests and falls back to basic
    notifications.
    """

    ready: bool = Field(..., description="Service accepts requests")
    status: str = Field(..., description="'ready' or 'degraded'")
    degraded: bool = Field(..., description="Some dependency is unhealthy")
    dependencies: dict[str, DependencyHealth] = Field(
        ..., description="Health of each dependency"
    )
