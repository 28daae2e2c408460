"""Immediate-versus-deferred delivery decisions."""

from datetime import datetime

from engine.config import QuietHours
from engine.enums import DeliveryReason, PriorityLevel
from engine.schemas.delivery import DeliveryTiming
from engine.schemas.notification import SmartNotificationRequest
from engine.schemas.scoring import PriorityResult
from engine.services.pattern_catalog import PatternCatalog
from engine.services.profile_store import ProfileStore
from engine.time_windows import local_hour, next_occurrence_of_hour


class DeliveryTimingOptimizer:
    """Decide when a scored notification should be delivered.

    Rules are applied in order; the first one that matches wins:

    1. critical notifications are always immediate;
    2. during quiet hours delivery moves to the end of the quiet window;
    3. users with preferred hours get non-high notifications at the next
       preferred hour;
    4. low notifications move to the next globally best hour for their type;
    5. everything else is immediate.

    Deferred times are always strictly in the future. When the current hour
    is itself a preferred or best hour the notification is not deferred.
    Preferred and best hours inside quiet hours are dropped first; when none
    remain, rules 3 and 4 do not apply.
    """

    def __init__(
        self,
        profiles: ProfileStore,
        patterns: PatternCatalog,
        quiet_hours: QuietHours,
    ) -> None:
        """Initialize the optimizer.

        Args:
            profiles: Behaviour profiles with preferred hours.
            patterns: Global best hours per type and level.
            quiet_hours: Configured quiet window.
        """
        self.profiles = profiles
        self.patterns = patterns
        self.quiet_hours = quiet_hours

    def optimize(
        self,
        request: SmartNotificationRequest,
        priority: PriorityResult,
        now: datetime,
    ) -> DeliveryTiming:
        """Return the delivery decision for a scored request."""
        if priority.level == PriorityLevel.CRITICAL:
            return DeliveryTiming(
                immediate=True, reason=DeliveryReason.CRITICAL_PRIORITY
            )

        hour = local_hour(now)
        if self.quiet_hours.contains(hour):
            return DeliveryTiming(
                immediate=False,
                scheduled_time=next_occurrence_of_hour(now, self.quiet_hours.end),
                reason=DeliveryReason.QUIET_HOURS,
            )

        profile = self.profiles.get(request.recipient_user_id)
        if (
            profile is not None
            and profile.preferred_hours
            and priority.level != PriorityLevel.HIGH
        ):
            timing = self._defer_to_hours(
                profile.preferred_hours, now, DeliveryReason.USER_PREFERENCE
            )
            if timing is not None:
                return timing

        if priority.level == PriorityLevel.LOW:
            pattern = self.patterns.get(request.notification_type, PriorityLevel.LOW)
            if pattern is not None and pattern.best_hours:
                timing = self._defer_to_hours(
                    pattern.best_hours, now, DeliveryReason.OPTIMAL_ENGAGEMENT
                )
                if timing is not None:
                    return timing

        return DeliveryTiming(immediate=True, reason=DeliveryReason.DEFAULT_IMMEDIATE)

    def _defer_to_hours(
        self, hours: list[int], now: datetime, reason: DeliveryReason
    ) -> DeliveryTiming | None:
        """Defer to the nearest usable hour, or deliver now if it is this hour.

        Returns None when every candidate hour is inside quiet hours.
        """
        candidates = {hour for hour in hours if not self.quiet_hours.contains(hour)}
        if not candidates:
            return None
        if local_hour(now) in candidates:
            return DeliveryTiming(
                immediate=True, reason=DeliveryReason.DEFAULT_IMMEDIATE
            )
        return DeliveryTiming(
            immediate=False,
            scheduled_time=min(
                next_occurrence_of_hour(now, hour) for hour in candidates
            ),
            reason=reason,
        )
