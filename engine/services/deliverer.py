"""Concurrent per-channel delivery of stored notifications."""

import asyncio

import structlog

from engine.enums import DeliveryChannel
from engine.models import Notification
from engine.schemas.delivery import ChannelResult
from engine.services.notification_store import NotificationStore
from engine.services.transports import ChannelTransport

logger = structlog.get_logger(__name__)


class Deliverer:
    """Sends a notification over each of its channels and records the outcome.

    Channels are delivered concurrently. A failure on one channel is
    recorded for that channel only and never affects the others.
    """

    def __init__(
        self,
        store: NotificationStore,
        transports: list[ChannelTransport],
    ) -> None:
        """Initialize the deliverer.

        Args:
            store: Store the outcome is recorded in.
            transports: One transport per supported channel.
        """
        self.store = store
        self.transports = {transport.channel: transport for transport in transports}

    async def deliver(self, notification: Notification) -> Notification:
        """Deliver over every selected channel.

        Returns:
            The notification with its delivery results and final status.
        """
        channels = list(notification.delivery_channels or [DeliveryChannel.IN_APP.value])
        outcomes = await asyncio.gather(
            *(self._deliver_channel(notification, channel) for channel in channels)
        )
        results = dict(zip(channels, outcomes, strict=True))

        updated = await self.store.record_delivery_result(
            notification.notification_id, results
        )
        logger.info(
            "notification_delivered",
            notification_id=str(notification.notification_id),
            user_id=notification.recipient_user_id,
            status=updated.status,
            succeeded=[channel for channel, result in results.items() if result.success],
            failed=[channel for channel, result in results.items() if not result.success],
        )
        return updated

    async def _deliver_channel(
        self, notification: Notification, channel: str
    ) -> ChannelResult:
        try:
            transport = self.transports.get(DeliveryChannel(channel))
        except ValueError:
            transport = None
        if transport is None:
            return ChannelResult(success=False, error=f"Channel not configured: {channel}")

        try:
            return await transport.deliver(notification)
        except Exception as e:
            logger.warning(
                "channel_delivery_failed",
                notification_id=str(notification.notification_id),
                channel=channel,
                error=str(e),
                error_type=type(e).__name__,
            )
            return ChannelResult(success=False, error=str(e))
