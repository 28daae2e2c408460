"""Behaviour profile and engagement pattern schemas."""

from engine.schemas.behavior.interaction_record import InteractionRecord
from engine.schemas.behavior.notification_pattern import (
    HourlyStat,
    NotificationPattern,
)
from engine.schemas.behavior.user_behavior_profile import (
    PriorityEngagement,
    TypeEngagement,
    UserBehaviorProfile,
)

__all__ = [
    "HourlyStat",
    "InteractionRecord",
    "NotificationPattern",
    "PriorityEngagement",
    "TypeEngagement",
    "UserBehaviorProfile",
]
