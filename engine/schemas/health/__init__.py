"""Health check schemas."""

from engine.schemas.health.dependency_health import DependencyHealth
from engine.schemas.health.response.liveness_response import LivenessResponse
from engine.schemas.health.response.readiness_response import ReadinessResponse

__all__ = ["DependencyHealth", "LivenessResponse", "ReadinessResponse"]
