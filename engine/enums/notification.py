"""Notification-related enumerations.

This module contains enums for priority levels, delivery channels, record
statuses and the delivery decisions made by the smart notification engine.
"""

from enum import Enum


class PriorityLevel(str, Enum):
    """Discrete priority levels derived from a 0-100 priority score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class DeliveryChannel(str, Enum):
    """Notification delivery channels.

    Each notification can be sent via multiple channels simultaneously.
    Member order is the canonical order channels are stored in.
    """

    IN_APP = "in_app"
    EMAIL = "email"
    SMS = "sms"


class NotificationStatusEnum(str, Enum):
    """Notification record lifecycle values.

    Named with 'Enum' suffix to avoid clashing with the status field.
    """

    PENDING = "pending"
    SCHEDULED = "scheduled"
    SENT = "sent"
    FAILED = "failed"


class DeliveryReason(str, Enum):
    """Why the engine chose a given delivery time."""

    CRITICAL_PRIORITY = "critical_priority"
    QUIET_HOURS = "quiet_hours"
    USER_PREFERENCE = "user_preference"
    OPTIMAL_ENGAGEMENT = "optimal_engagement"
    DEFAULT_IMMEDIATE = "default_immediate"
    RATE_LIMITED = "rate_limited"
    DIGEST_BATCHED = "digest_batched"
    BASIC_FALLBACK = "basic_fallback"


class AcknowledgementEvent(str, Enum):
    """User feedback events reported by the UI or a channel callback."""

    READ = "read"
    CLICKED = "clicked"
    DISMISSED = "dismissed"
