"""Liveness and readiness checks."""

import os
import time

from django.db import connection
from django.db.utils import OperationalError

import django_rq
import structlog

from engine.enums import HealthStatus
from engine.schemas.health import (
    DependencyHealth,
    LivenessResponse,
    ReadinessResponse,
)
from engine.services.engine_state import EngineState

logger = structlog.get_logger(__name__)


class HealthService:
    """Health checks with a short result cache for the database and queue."""

    def __init__(self, cache_ttl_seconds: float = 5.0) -> None:
        """Initialize the health service.

        Args:
            cache_ttl_seconds: How long a dependency result is reused.
        """
        self.cache_ttl_seconds = cache_ttl_seconds
        self._cache: dict[str, tuple[float, DependencyHealth]] = {}

    def get_liveness_status(self) -> LivenessResponse:
        """Liveness never checks dependencies."""
        return LivenessResponse(
            service=os.getenv("SERVICE_NAME", "smart-notification-service")
        )

    def get_readiness_status(self, state: EngineState) -> ReadinessResponse:
        """Check the database, the job queue and the engine state.

        Unhealthy dependencies make the service degraded, never unready.

        Args:
            state: State of the engine serving requests.
        """
        dependencies = {
            "database": self._cached("database", self.check_database_health),
            "queue": self._cached("queue", self.check_queue_health),
            "engine_state": self.check_engine_state(state),
        }
        degraded = not all(health.healthy for health in dependencies.values())
        return ReadinessResponse(
            ready=True,
            status="degraded" if degraded else "ready",
            degraded=degraded,
            dependencies=dependencies,
        )

    def _cached(self, name: str, check) -> DependencyHealth:
        now = time.time()
        cached = self._cache.get(name)
        if cached is not None and now - cached[0] < self.cache_ttl_seconds:
            return cached[1]
        health = check()
        self._cache[name] = (now, health)
        return health

    def check_database_health(self) -> DependencyHealth:
        """Validate the database connection without running a query."""
        start_time = time.perf_counter()
        try:
            connection.ensure_connection()
        except OperationalError as e:
            logger.warning("database_health_check_failed", error=str(e))
            return DependencyHealth(
                healthy=False,
                status=HealthStatus.UNHEALTHY,
                message=f"Database connection failed: {e!s}",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )
        return DependencyHealth(
            healthy=True,
            status=HealthStatus.HEALTHY,
            message="Database connection successful",
            response_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def check_queue_health(self) -> DependencyHealth:
        """Ping the Redis instance behind the default RQ queue."""
        start_time = time.perf_counter()
        try:
            django_rq.get_connection("default").ping()
        except Exception as e:
            logger.warning("queue_health_check_failed", error=str(e))
            return DependencyHealth(
                healthy=False,
                status=HealthStatus.ERROR,
                message=f"Queue connection failed: {e!s}",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )
        return DependencyHealth(
            healthy=True,
            status=HealthStatus.HEALTHY,
            message="Queue connection successful",
            response_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    @staticmethod
    def check_engine_state(state: EngineState) -> DependencyHealth:
        """Report whether profiles, patterns and models are loaded."""
        details = {
            "profiles": len(state.profiles),
            "patterns": len(state.patterns),
            "priorityModels": len(state.models),
            "loadedAt": state.loaded_at.isoformat() if state.loaded_at else None,
        }
        if state.ready:
            return DependencyHealth(
                healthy=True,
                status=HealthStatus.HEALTHY,
                message="Engine state loaded",
                details=details,
            )
        return DependencyHealth(
            healthy=False,
            status=HealthStatus.DEGRADED,
            message=state.last_error or "Engine state not loaded",
            details=details,
        )


health_service = HealthService()
