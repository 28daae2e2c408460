"""Cross-user engagement patterns per (notification type, priority level)."""

from collections import defaultdict
from collections.abc import Iterable
from statistics import mean

import structlog

from engine.constants import MAX_BEST_HOURS
from engine.enums import PriorityLevel
from engine.schemas.behavior import HourlyStat, InteractionRecord, NotificationPattern

logger = structlog.get_logger(__name__)

READ_RATE_WEIGHT = 0.7
RESPONSE_SPEED_WEIGHT = 0.3


def best_delivery_hours(hourly_stats: dict[int, HourlyStat]) -> list[int]:
    """Rank hours by ``readRate*0.7 + (1 - avgResponseMinutes/60)*0.3``.

    Args:
        hourly_stats: Engagement per hour of day.

    Returns:
        Up to four hours, best first; ties keep ascending hour order.
    """

    def score(hour: int) -> float:
        stat = hourly_stats[hour]
        return stat.read_rate * READ_RATE_WEIGHT + (
            1 - stat.avg_response_minutes / 60
        ) * RESPONSE_SPEED_WEIGHT

    return sorted(sorted(hourly_stats), key=lambda hour: -score(hour))[
        :MAX_BEST_HOURS
    ]


def build_pattern(records: list[InteractionRecord]) -> NotificationPattern:
    """Aggregate interactions of one (type, level) pair into a pattern."""
    by_hour: dict[int, list[InteractionRecord]] = defaultdict(list)
    for record in records:
        by_hour[record.sent_hour].append(record)

    hourly_stats = {}
    for hour, hour_records in by_hour.items():
        total = len(hour_records)
        response_minutes = [
            record.minutes_to_read
            for record in hour_records
            if record.minutes_to_read is not None and record.minutes_to_read >= 0
        ]
        hourly_stats[hour] = HourlyStat(
            total_count=total,
            read_rate=sum(1 for r in hour_records if r.was_read) / total,
            click_rate=sum(1 for r in hour_records if r.was_clicked) / total,
            avg_response_minutes=mean(response_minutes) if response_minutes else 0.0,
        )

    return NotificationPattern(
        hourly_stats=hourly_stats,
        best_hours=best_delivery_hours(hourly_stats),
        total_samples=len(records),
    )


class PatternCatalog:
    """In-memory map of (type, level) to engagement pattern."""

    def __init__(self) -> None:
        """Initialize an empty catalog."""
        self._patterns: dict[tuple[str, PriorityLevel], NotificationPattern] = {}

    def load(self, interactions: Iterable[InteractionRecord]) -> int:
        """Rebuild all patterns from interaction history.

        Args:
            interactions: Delivered notifications inside the pattern window.

        Returns:
            Number of (type, level) patterns built.
        """
        grouped: dict[tuple[str, PriorityLevel], list[InteractionRecord]] = (
            defaultdict(list)
        )
        for record in interactions:
            grouped[(record.notification_type, record.priority_level)].append(record)

        self._patterns = {key: build_pattern(records) for key, records in grouped.items()}
        logger.info("notification_patterns_loaded", pattern_count=len(self._patterns))
        return len(self._patterns)

    def get(
        self, notification_type: str, level: PriorityLevel
    ) -> NotificationPattern | None:
        """Return the pattern for a type and level, if any history exists."""
        return self._patterns.get((notification_type, level))

    def __len__(self) -> int:
        """Return the number of loaded patterns."""
        return len(self._patterns)
