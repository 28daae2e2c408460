"""Exception handling utilities for the smart notification service."""

from engine.exceptions.downstream_exceptions import (
    DownstreamServiceError,
    DownstreamServiceUnavailableError,
)
from engine.exceptions.engine_exceptions import (
    ChannelTransportError,
    EngineStateError,
    NotificationNotFoundError,
    PriorityModelError,
    SmartNotificationError,
)
from engine.exceptions.handlers import custom_exception_handler

__all__ = [
    "ChannelTransportError",
    "DownstreamServiceError",
    "DownstreamServiceUnavailableError",
    "EngineStateError",
    "NotificationNotFoundError",
    "PriorityModelError",
    "SmartNotificationError",
    "custom_exception_handler",
]
