"""Health response schemas."""

from engine.schemas.health.response.liveness_response import LivenessResponse
from engine.schemas.health.response.readiness_response import ReadinessResponse

__all__ = ["LivenessResponse", "ReadinessResponse"]
