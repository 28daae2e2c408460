"""Database models for the engine application."""

from engine.models.notification import Notification
from engine.models.recipient_throttle import RecipientThrottle

__all__ = ["Notification", "RecipientThrottle"]
