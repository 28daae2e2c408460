"""Interface shared by channel transports."""

from typing import Protocol

from engine.enums import DeliveryChannel
from engine.models import Notification
from engine.schemas.delivery import ChannelResult


class ChannelTransport(Protocol):
    """Delivers a notification over one channel.

    Transports may raise; the deliverer records any exception as a failed
    ``ChannelResult`` for that channel.
    """

    channel: DeliveryChannel

    async def deliver(self, notification: Notification) -> ChannelResult:
        """Deliver ``notification`` and report the outcome."""
        ...
