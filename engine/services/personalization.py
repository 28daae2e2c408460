"""Content personalization and delivery channel selection."""

from engine.config import EngineSettings
from engine.constants import (
    DETAIL_READ_RATE,
    EMAIL_FALLBACK_READ_RATE,
    FAST_RESPONSE_MINUTES,
    LOW_ENGAGEMENT_READ_RATE,
    TITLE_MAX_LENGTH,
    URGENCY_PREFIXES,
)
from engine.enums import DeliveryChannel, PriorityLevel
from engine.schemas.delivery import PersonalizedContent
from engine.schemas.notification import SmartNotificationRequest
from engine.schemas.scoring import PriorityResult
from engine.services.profile_store import ProfileStore


def with_urgency_prefix(title: str, level: PriorityLevel) -> str:
    """Prefix ``title`` with the urgency wording for ``level``.

    Titles that already carry one of the prefixes are returned unchanged.
    The result is cut to ``TITLE_MAX_LENGTH`` so it always fits the stored
    title column.
    """
    if any(title.startswith(prefix) for prefix in URGENCY_PREFIXES.values()):
        return title
    return f"{URGENCY_PREFIXES[level]} {title}"[:TITLE_MAX_LENGTH]



class ContentPersonalizer:
    """Adjusts wording and detail flags to the recipient's engagement."""

    def __init__(self, profiles: ProfileStore) -> None:
        """Initialize the personalizer.

        Args:
            profiles: Behaviour profiles keyed by user id.
        """
        self.profiles = profiles

    def personalize(
        self, request: SmartNotificationRequest, priority: PriorityResult
    ) -> PersonalizedContent:
        """Return the title, message and presentation flags to deliver."""
        content = PersonalizedContent(title=request.title, message=request.message)

        profile = self.profiles.get(request.recipient_user_id)
        if profile is None:
            return content

        updates = {}
        if profile.read_rate < LOW_ENGAGEMENT_READ_RATE:
            title = with_urgency_prefix(request.title, priority.level)
            updates["title"] = title
            updates["title_rewritten"] = title != request.title

        type_engagement = profile.per_type_engagement.get(request.notification_type)
        if type_engagement is not None and type_engagement.read_rate > DETAIL_READ_RATE:
            updates["include_details"] = True

        level_engagement = profile.per_priority_engagement.get(priority.level)
        if (
            level_engagement is not None
            and 0 < level_engagement.avg_response_minutes < FAST_RESPONSE_MINUTES
        ):
            updates["add_urgency_indicator"] = True

        return content.model_copy(update=updates)


class ChannelSelector:
    """Chooses delivery channels from priority and engagement."""

    def __init__(self, profiles: ProfileStore, settings: EngineSettings) -> None:
        """Initialize the selector.

        Args:
            profiles: Behaviour profiles keyed by user id.
            settings: Engine settings; ``sms_enabled`` gates the SMS channel.
        """
        self.profiles = profiles
        self.sms_enabled = settings.sms_enabled

    def select(
        self, request: SmartNotificationRequest, priority: PriorityResult
    ) -> list[DeliveryChannel]:
        """Return the selected channels in canonical order."""
        channels = {DeliveryChannel.IN_APP}

        if priority.level in (PriorityLevel.HIGH, PriorityLevel.CRITICAL):
            channels.add(DeliveryChannel.EMAIL)

        if priority.level == PriorityLevel.CRITICAL and self.sms_enabled:
            channels.add(DeliveryChannel.SMS)

        profile = self.profiles.get(request.recipient_user_id)
        if profile is not None and profile.read_rate < EMAIL_FALLBACK_READ_RATE:
            channels.add(DeliveryChannel.EMAIL)

        return [channel for channel in DeliveryChannel if channel in channels]
