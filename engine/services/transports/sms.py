"""SMS delivery channel."""

from asgiref.sync import sync_to_async

from engine.enums import DeliveryChannel
from engine.models import Notification
from engine.schemas.delivery import ChannelResult
from engine.services.downstream import SmsGatewayClient

SMS_MAX_LENGTH = 160


def sms_body(notification: Notification) -> str:
    """Title and message joined and cut to a single SMS segment."""
    body = f"{notification.title}: {notification.message}"
    if len(body) > SMS_MAX_LENGTH:
        body = body[: SMS_MAX_LENGTH - 3].rstrip() + "..."
    return body


class SmsTransport:
    """Submits the notification to the SMS gateway."""

    channel = DeliveryChannel.SMS

    def __init__(self, client: SmsGatewayClient | None = None) -> None:
        """Initialize the transport.

        Args:
            client: Gateway client, built from settings when omitted.
        """
        self.client = client or SmsGatewayClient()

    async def deliver(self, notification: Notification) -> ChannelResult:
        """Send the notification to ``recipient_phone``."""
        if not notification.recipient_phone:
            return ChannelResult(success=False, error="No recipient phone number")

        await sync_to_async(self.client.send_sms)(
            to_phone=notification.recipient_phone,
            body=sms_body(notification),
            reference=str(notification.notification_id),
        )
        return ChannelResult(success=True)
