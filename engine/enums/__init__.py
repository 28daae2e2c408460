"""Enumerations for the engine app."""

from engine.enums.health_status import HealthStatus
from engine.enums.notification import (
    AcknowledgementEvent,
    DeliveryChannel,
    DeliveryReason,
    NotificationStatusEnum,
    PriorityLevel,
)

__all__ = [
    "AcknowledgementEvent",
    "DeliveryChannel",
    "DeliveryReason",
    "HealthStatus",
    "NotificationStatusEnum",
    "PriorityLevel",
]
