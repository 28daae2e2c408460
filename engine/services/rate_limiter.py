"""Per-user hourly and daily notification rate limits."""

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from engine.config import EngineSettings
from engine.constants import NEXT_DAY_DELIVERY_HOUR, RATE_LIMIT_RETRY_MINUTES
from engine.schemas.delivery import RateLimitCheck
from engine.time_windows import start_of_day, start_of_hour, start_of_next_hour

if TYPE_CHECKING:
    from engine.services.notification_store import NotificationStore


class RateLimiter:
    """Evaluates a user's rate window and picks the next delivery slot.

    Counts are never cached. ``check`` reads them from the store; the
    admission path counts inside its own transaction and calls ``evaluate``.
    """

    def __init__(
        self, settings: EngineSettings, store: "NotificationStore"
    ) -> None:
        """Initialize the limiter.

        Args:
            settings: Engine settings holding the hourly and daily limits.
            store: Notification store the windows are counted from.
        """
        self.store = store
        self.hourly_limit = settings.max_notifications_per_hour
        self.daily_limit = settings.max_notifications_per_day

    @staticmethod
    def windows(now: datetime) -> tuple[datetime, datetime]:
        """Return the start of the current local hour and day."""
        return start_of_hour(now), start_of_day(now)

    def evaluate(self, hourly_count: int, daily_count: int) -> RateLimitCheck:
        """Compare counts against the configured limits."""
        return RateLimitCheck(
            allowed=hourly_count < self.hourly_limit
            and daily_count < self.daily_limit,
            hourly_count=hourly_count,
            daily_count=daily_count,
            hourly_limit=self.hourly_limit,
            daily_limit=self.daily_limit,
        )

    @staticmethod
    def next_available_slot(check: RateLimitCheck, now: datetime) -> datetime:
        """When a rate-limited notification should be retried.

        Tomorrow at 09:00 local if the daily limit is used up, the start of
        the next hour if the hourly limit is, otherwise 15 minutes from now.
        """
        if check.daily_exhausted:
            tomorrow = start_of_day(now) + timedelta(days=1)
            return tomorrow.replace(hour=NEXT_DAY_DELIVERY_HOUR)
        if check.hourly_exhausted:
            return start_of_next_hour(now)
        return now + timedelta(minutes=RATE_LIMIT_RETRY_MINUTES)

    async def check(self, user_id: str, now: datetime) -> RateLimitCheck:
        """Count the user's current windows and compare them to the limits."""
        hour_start, day_start = self.windows(now)
        hourly_count = await self.store.count_notifications(user_id, hour_start)
        daily_count = await self.store.count_notifications(user_id, day_start)
        return self.evaluate(hourly_count, daily_count)
