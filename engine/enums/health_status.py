"""Health status values reported by readiness checks."""

from enum import Enum


class HealthStatus(str, Enum):
    """State of one dependency of the service."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    ERROR = "error"
