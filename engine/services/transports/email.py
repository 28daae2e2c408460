"""Email delivery channel."""

from asgiref.sync import sync_to_async

from engine.enums import DeliveryChannel
from engine.models import Notification
from engine.schemas.delivery import ChannelResult
from engine.services.email_service import EmailService

EMAIL_TEMPLATE = "emails/smart_notification.html"


class EmailTransport:
    """Renders the notification template and sends it over SMTP."""

    channel = DeliveryChannel.EMAIL

    def __init__(self, email_service: EmailService | None = None) -> None:
        """Initialize the transport.

        Args:
            email_service: SMTP sender, built from settings when omitted.
        """
        self.email_service = email_service or EmailService()

    @staticmethod
    def template_context(notification: Notification) -> dict:
        """Values the email template is rendered with."""
        personalization = (notification.ai_metadata or {}).get("personalization", {})
        return {
            "title": notification.title,
            "message": notification.message,
            "priority_level": notification.priority_level,
            "include_details": personalization.get("includeDetails", False),
            "add_urgency_indicator": personalization.get("addUrgencyIndicator", False),
            "context_items": sorted((notification.context_data or {}).items()),
            "digest_count": len(notification.digest_member_ids or []),
        }

    async def deliver(self, notification: Notification) -> ChannelResult:
        """Send the notification to ``recipient_email``."""
        if not notification.recipient_email:
            return ChannelResult(success=False, error="No recipient email address")

        await sync_to_async(self.email_service.send_template_email)(
            to_email=notification.recipient_email,
            subject=notification.title,
            template_name=EMAIL_TEMPLATE,
            context=self.template_context(notification),
        )
        return ChannelResult(success=True)
