"""Per-user behaviour profiles built from notification history."""

from collections import defaultdict
from collections.abc import Iterable
from statistics import mean

import structlog

from engine.constants import MAX_PREFERRED_DAYS, MAX_PREFERRED_HOURS
from engine.enums import PriorityLevel
from engine.schemas.behavior import (
    InteractionRecord,
    PriorityEngagement,
    TypeEngagement,
    UserBehaviorProfile,
)

logger = structlog.get_logger(__name__)


def _read_rate(records: list[InteractionRecord]) -> float:
    return sum(1 for record in records if record.was_read) / len(records)


def _avg_response_minutes(records: list[InteractionRecord]) -> float:
    minutes = [
        record.minutes_to_read
        for record in records
        if record.minutes_to_read is not None and record.minutes_to_read > 0
    ]
    return mean(minutes) if minutes else 0.0


def _ranked_by_volume(keys: Iterable[int], limit: int) -> list[int]:
    counts: dict[int, int] = defaultdict(int)
    for key in keys:
        counts[key] += 1
    # Ties keep ascending key order
    return sorted(sorted(counts), key=lambda key: -counts[key])[:limit]


def build_user_profile(
    user_id: str, interactions: list[InteractionRecord]
) -> UserBehaviorProfile:
    """Aggregate one user's interactions into a behaviour profile.

    Args:
        user_id: The user the interactions belong to.
        interactions: Non-empty list of the user's delivered notifications.

    Returns:
        The user's engagement profile.
    """
    read = [record for record in interactions if record.was_read]
    clicked = [record for record in interactions if record.was_clicked]

    by_type: dict[str, list[InteractionRecord]] = defaultdict(list)
    by_priority: dict[PriorityLevel, list[InteractionRecord]] = defaultdict(list)
    for record in interactions:
        by_type[record.notification_type].append(record)
        by_priority[record.priority_level].append(record)

    return UserBehaviorProfile(
        user_id=user_id,
        total_notifications=len(interactions),
        read_rate=len(read) / len(interactions),
        click_rate=len(clicked) / len(interactions),
        avg_response_minutes=_avg_response_minutes(interactions),
        preferred_hours=_ranked_by_volume(
            (record.sent_hour for record in read), MAX_PREFERRED_HOURS
        ),
        preferred_days=_ranked_by_volume(
            (record.sent_day_of_week for record in read), MAX_PREFERRED_DAYS
        ),
        per_type_engagement={
            notification_type: TypeEngagement(
                read_rate=_read_rate(records), count=len(records)
            )
            for notification_type, records in by_type.items()
        },
        per_priority_engagement={
            level: PriorityEngagement(
                read_rate=_read_rate(records),
                avg_response_minutes=_avg_response_minutes(records),
                count=len(records),
            )
            for level, records in by_priority.items()
        },
    )


class ProfileStore:
    """In-memory map of user id to behaviour profile.

    ``load`` replaces the whole map, so a refresh never leaves a mix of old
    and new profiles visible to readers.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._profiles: dict[str, UserBehaviorProfile] = {}

    def load(self, interactions: Iterable[InteractionRecord]) -> int:
        """Rebuild all profiles from interaction history.

        Args:
            interactions: Delivered notifications inside the history window.

        Returns:
            Number of profiles built.
        """
        grouped: dict[str, list[InteractionRecord]] = defaultdict(list)
        for record in interactions:
            grouped[record.recipient_user_id].append(record)

        self._profiles = {
            user_id: build_user_profile(user_id, records)
            for user_id, records in grouped.items()
        }
        logger.info("user_profiles_loaded", profile_count=len(self._profiles))
        return len(self._profiles)

    def get(self, user_id: str) -> UserBehaviorProfile | None:
        """Return the profile for ``user_id``, if the user has history."""
        return self._profiles.get(user_id)

    def __len__(self) -> int:
        """Return the number of loaded profiles."""
        return len(self._profiles)
