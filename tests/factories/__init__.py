"""Builders for test data.

Values that tests do not assert on come from Faker so each run exercises
slightly different content.
"""

from datetime import datetime
from typing import Any

from faker import Faker

from engine.enums import DeliveryChannel, NotificationStatusEnum, PriorityLevel
from engine.models import Notification
from engine.schemas.behavior import (
    InteractionRecord,
    NotificationPattern,
    UserBehaviorProfile,
)
from engine.schemas.delivery import ChannelResult
from engine.schemas.notification import SmartNotificationRequest
from engine.services.pattern_catalog import PatternCatalog
from engine.services.profile_store import ProfileStore
from engine.time_windows import day_of_week, local_hour

fake = Faker()


def notification_request(**overrides: Any) -> SmartNotificationRequest:
    """A valid request; keyword overrides use field names."""
    fields = {
        "notification_type": "assessment_due",
        "recipient_user_id": f"user-{fake.uuid4()}",
        "title": fake.sentence(nb_words=4).rstrip("."),
        "message": fake.paragraph(nb_sentences=2),
        "context": {},
    }
    fields.update(overrides)
    return SmartNotificationRequest(**fields)


def notification_payload(**overrides: Any) -> dict[str, Any]:
    """A JSON request body as sent by client services."""
    payload = {
        "type": "system_notification",
        "recipientUserId": f"user-{fake.uuid4()}",
        "title": fake.sentence(nb_words=4).rstrip("."),
        "message": fake.paragraph(nb_sentences=2),
        "context": {"severity": "info", "userImpact": "low"},
    }
    payload.update(overrides)
    return payload


def create_notification(**overrides: Any) -> Notification:
    """Insert a notification row directly."""
    fields = {
        "recipient_user_id": f"user-{fake.uuid4()}",
        "notification_type": "system_notification",
        "title": fake.sentence(nb_words=4).rstrip("."),
        "message": fake.paragraph(nb_sentences=2),
        "priority_level": PriorityLevel.MEDIUM.value,
        "priority_score": 50.0,
        "delivery_channels": [DeliveryChannel.IN_APP.value],
        "status": NotificationStatusEnum.PENDING.value,
    }
    fields.update(overrides)
    return Notification.objects.create(**fields)


def interaction(
    user_id: str,
    sent_at: datetime,
    notification_type: str = "assessment_due",
    priority_level: PriorityLevel = PriorityLevel.MEDIUM,
    minutes_to_read: float | None = None,
    clicked: bool = False,
) -> InteractionRecord:
    """A history record; read when ``minutes_to_read`` is given."""
    return InteractionRecord(
        recipient_user_id=user_id,
        notification_type=notification_type,
        priority_level=priority_level,
        sent_at=sent_at,
        sent_hour=local_hour(sent_at),
        sent_day_of_week=day_of_week(sent_at),
        was_read=minutes_to_read is not None,
        was_clicked=clicked,
        minutes_to_read=minutes_to_read,
    )


class RecordingTransport:
    """Channel transport that records what it was asked to deliver."""

    def __init__(self, channel: str, fail_with: Exception | None = None):
        self.channel = DeliveryChannel(channel)
        self.fail_with = fail_with
        self.delivered: list[Notification] = []

    async def deliver(self, notification: Notification) -> ChannelResult:
        if self.fail_with is not None:
            raise self.fail_with
        self.delivered.append(notification)
        return ChannelResult(success=True)


def behavior_profile(user_id: str, **overrides: Any) -> UserBehaviorProfile:
    """A profile with middling engagement unless overridden."""
    fields = {
        "user_id": user_id,
        "total_notifications": 20,
        "read_rate": 0.5,
        "click_rate": 0.1,
    }
    fields.update(overrides)
    return UserBehaviorProfile(**fields)


def profile_store(*profiles: UserBehaviorProfile) -> ProfileStore:
    """A profile store holding exactly ``profiles``."""
    store = ProfileStore()
    store._profiles = {profile.user_id: profile for profile in profiles}
    return store


def pattern_catalog(
    patterns: dict[tuple[str, PriorityLevel], NotificationPattern],
) -> PatternCatalog:
    """A pattern catalog holding exactly ``patterns``."""
    catalog = PatternCatalog()
    catalog._patterns = dict(patterns)
    return catalog
