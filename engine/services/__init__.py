"""Services for the engine app.

Importing this package loads the models, so it must not be imported from
``engine.apps`` at module level.
"""

from engine.services.email_service import EmailService
from engine.services.health_service import HealthService, health_service
from engine.services.smart_notification_engine import (
    SmartNotificationEngine,
    build_engine,
    ensure_engine_ready,
    get_engine,
)

__all__ = [
    "EmailService",
    "HealthService",
    "SmartNotificationEngine",
    "build_engine",
    "ensure_engine_ready",
    "get_engine",
    "health_service",
]
