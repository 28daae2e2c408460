"""Channel transports used by the deliverer."""

from engine.services.transports.base import ChannelTransport
from engine.services.transports.email import EmailTransport
from engine.services.transports.in_app import InAppTransport
from engine.services.transports.sms import SmsTransport

__all__ = ["ChannelTransport", "EmailTransport", "InAppTransport", "SmsTransport"]
