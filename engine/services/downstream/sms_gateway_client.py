"""Client for the HTTP SMS gateway."""

from django.conf import settings

import structlog

from engine.services.downstream.base_downstream_client import BaseDownstreamClient

logger = structlog.get_logger(__name__)


class SmsGatewayClient(BaseDownstreamClient):
    """Sends text messages through the gateway's ``/messages`` endpoint."""

    def __init__(self, base_url: str | None = None, api_key: str | None = None):
        """Initialize the client from Django settings unless overridden.

        Args:
            base_url: Gateway base URL, defaults to ``SMS_GATEWAY_URL``
            api_key: Gateway API key, defaults to ``SMS_GATEWAY_API_KEY``
        """
        super().__init__(
            service_name="sms-gateway",
            base_url=base_url or settings.SMS_GATEWAY_URL,
            timeout=getattr(settings, "SMS_GATEWAY_TIMEOUT", 10),
        )
        self.api_key = api_key if api_key is not None else settings.SMS_GATEWAY_API_KEY

    def _get_headers(self) -> dict[str, str]:
        headers = super()._get_headers()
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def send_sms(self, to_phone: str, body: str, reference: str) -> str | None:
        """Submit one message.

        Args:
            to_phone: Destination phone number
            body: Message text
            reference: Caller reference echoed back by the gateway

        Returns:
            The gateway's message id, if it returned one.
        """
        response = self._post(
            "/messages",
            {"to": to_phone, "body": body, "reference": reference},
        )
        message_id = response.json().get("messageId") if response.content else None
        logger.info("sms_submitted", reference=reference, message_id=message_id)
        return message_id
