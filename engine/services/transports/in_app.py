"""In-app delivery channel."""

import structlog

from engine.enums import DeliveryChannel
from engine.models import Notification
from engine.schemas.delivery import ChannelResult

logger = structlog.get_logger(__name__)


class InAppTransport:
    """The stored notification is the in-app delivery; clients read it back."""

    channel = DeliveryChannel.IN_APP

    async def deliver(self, notification: Notification) -> ChannelResult:
        """Mark the notification as available in the recipient's inbox."""
        logger.debug(
            "in_app_notification_available",
            notification_id=str(notification.notification_id),
            user_id=notification.recipient_user_id,
        )
        return ChannelResult(success=True)
