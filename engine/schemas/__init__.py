"""Schemas for the engine app."""

from engine.schemas.behavior import (
    InteractionRecord,
    NotificationPattern,
    UserBehaviorProfile,
)
from engine.schemas.delivery import (
    ChannelResult,
    DeliveryTiming,
    PersonalizedContent,
    RateLimitCheck,
)
from engine.schemas.health import (
    DependencyHealth,
    LivenessResponse,
    ReadinessResponse,
)
from engine.schemas.notification import (
    AcknowledgementRequest,
    NotificationDetail,
    SmartNotificationRequest,
)
from engine.schemas.scoring import PriorityModel, PriorityResult

__all__ = [
    "AcknowledgementRequest",
    "ChannelResult",
    "DeliveryTiming",
    "DependencyHealth",
    "InteractionRecord",
    "LivenessResponse",
    "NotificationDetail",
    "NotificationPattern",
    "PersonalizedContent",
    "PriorityModel",
    "PriorityResult",
    "RateLimitCheck",
    "ReadinessResponse",
    "SmartNotificationRequest",
    "UserBehaviorProfile",
]
