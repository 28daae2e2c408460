"""Dependency health schema."""

from typing import Any

from pydantic import Field

from engine.enums.health_status import HealthStatus
from engine.schemas.base_schema_model import BaseSchemaModel


class DependencyHealth(BaseSchemaModel):
    """Health of a single dependency (database, queue or engine state)."""

    healthy: bool = Field(..., description="Whether the dependency is usable")
    status: HealthStatus = Field(..., description="Dependency status")
    message: str = Field(..., description="Human-readable health message")
    response_time_ms: float | None = Field(
        None, description="Check duration in milliseconds"
    )
    details: dict[str, Any] = Field(
        default_factory=dict, description="Dependency-specific facts"
    )
