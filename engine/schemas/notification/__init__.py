"""Notification schemas."""

from engine.schemas.notification.acknowledgement_request import (
    AcknowledgementRequest,
)
from engine.schemas.notification.notification_detail import NotificationDetail
from engine.schemas.notification.smart_notification_request import (
    SmartNotificationRequest,
)

__all__ = [
    "AcknowledgementRequest",
    "NotificationDetail",
    "SmartNotificationRequest",
]
