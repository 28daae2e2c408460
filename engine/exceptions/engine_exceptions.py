"""Exceptions raised by the smart notification engine."""


class SmartNotificationError(Exception):
    """Base exception for smart notification engine errors."""


class EngineStateError(SmartNotificationError):
    """Profiles, patterns or priority models could not be loaded."""

    def __init__(self, stage: str, message: str):
        """Initialize engine state error.

        Args:
            stage: Loading stage that failed (profiles, patterns, models)
            message: Error message
        """
        self.stage = stage
        super().__init__(f"Failed to load {stage}: {message}")


class PriorityModelError(SmartNotificationError):
    """A priority model definition is invalid."""

    def __init__(self, notification_type: str, message: str):
        """Initialize priority model error.

        Args:
            notification_type: Type whose model failed validation
            message: Validation error details
        """
        self.notification_type = notification_type
        super().__init__(
            f"Invalid priority model for '{notification_type}': {message}"
        )


class NotificationNotFoundError(SmartNotificationError):
    """Notification record not found (404)."""

    def __init__(self, notification_id: str):
        """Initialize notification not found error.

        Args:
            notification_id: ID of the notification that was not found
        """
        self.notification_id = notification_id
        self.status_code = 404
        super().__init__(f"Notification with ID {notification_id} not found")


class ChannelTransportError(SmartNotificationError):
    """A channel transport could not deliver a notification."""

    def __init__(self, channel: str, message: str):
        """Initialize channel transport error.

        Args:
            channel: Delivery channel that failed
            message: Error message
        """
        self.channel = channel
        super().__init__(message)
