"""Local-time helpers shared by the timing, rate-limit and scheduling code.

All helpers take aware datetimes and work in the project time zone
(``settings.TIME_ZONE``) through ``django.utils.timezone.localtime``.
"""

from datetime import datetime, timedelta

from django.utils import timezone


def local_hour(moment: datetime) -> int:
    """Hour of day (0-23) of ``moment`` in local time."""
    return timezone.localtime(moment).hour


def day_of_week(moment: datetime) -> int:
    """Day of week of ``moment`` in local time, 0 for Sunday."""
    return (timezone.localtime(moment).weekday() + 1) % 7


def start_of_hour(moment: datetime) -> datetime:
    """Truncate ``moment`` to the start of its local hour."""
    return timezone.localtime(moment).replace(minute=0, second=0, microsecond=0)


def start_of_day(moment: datetime) -> datetime:
    """Truncate ``moment`` to local midnight."""
    return start_of_hour(moment).replace(hour=0)


def start_of_next_hour(moment: datetime) -> datetime:
    """Start of the local hour following the one ``moment`` falls in."""
    return start_of_hour(moment) + timedelta(hours=1)


def next_occurrence_of_hour(moment: datetime, hour: int) -> datetime:
    """First local ``hour:00`` strictly after ``moment``."""
    candidate = start_of_hour(moment).replace(hour=hour)
    if candidate <= moment:
        candidate += timedelta(days=1)
    return candidate


def epoch_minute(moment: datetime) -> int:
    """Whole minutes since the Unix epoch, used as the scheduling key."""
    return int(moment.timestamp() // 60)
