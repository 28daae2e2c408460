"""The smart notification pipeline.

``send_smart_notification`` runs a request through explicit stages:

    priority -> timing -> personalization -> channels -> admission
    -> dispatch (deliver now, schedule, or queue for a digest)

Any failure in a stage is handled in one place: it is logged with the
stage name and the request falls back to a basic notification. The call
itself never raises.
"""

from datetime import datetime
from typing import Any

from django.utils import timezone

import structlog

from engine.config import EngineSettings, load_engine_settings
from engine.enums import (
    DeliveryChannel,
    DeliveryReason,
    NotificationStatusEnum,
    PriorityLevel,
)
from engine.exceptions import EngineStateError
from engine.models import Notification
from engine.schemas.delivery import (
    DeliveryTiming,
    PersonalizedContent,
    RateLimitCheck,
)
from engine.schemas.notification import SmartNotificationRequest
from engine.schemas.scoring import PriorityResult
from engine.services.batch_scheduler import BatchScheduler
from engine.services.deliverer import Deliverer
from engine.services.delivery_timing import DeliveryTimingOptimizer
from engine.services.engine_state import EngineState
from engine.services.notification_store import NotificationStore
from engine.services.personalization import ChannelSelector, ContentPersonalizer
from engine.services.priority_calculator import PriorityCalculator, basic_priority
from engine.services.rate_limiter import RateLimiter
from engine.services.transports import EmailTransport, InAppTransport, SmsTransport

logger = structlog.get_logger(__name__)


def _base_fields(request: SmartNotificationRequest) -> dict[str, Any]:
    return {
        "recipient_user_id": request.recipient_user_id,
        "notification_type": request.notification_type,
        "message": request.message,
        "context_data": request.context,
        "recipient_email": request.recipient_email,
        "recipient_phone": request.recipient_phone,
    }


def _ai_metadata(
    priority: PriorityResult,
    timing: DeliveryTiming,
    content: PersonalizedContent,
) -> dict[str, Any]:
    return {
        "priorityFactors": [
            item.model_dump(mode="json", by_alias=True)
            for item in priority.factor_breakdown
        ],
        "confidence": priority.confidence,
        "deliveryReason": timing.reason.value,
        "personalization": {
            "includeDetails": content.include_details,
            "addUrgencyIndicator": content.add_urgency_indicator,
            "titleRewritten": content.title_rewritten,
        },
    }


class SmartNotificationEngine:
    """Scores, schedules and delivers notifications for one tenant."""

    def __init__(
        self,
        settings: EngineSettings,
        state: EngineState,
        store: NotificationStore,
        deliverer: Deliverer,
        scheduler: BatchScheduler,
    ) -> None:
        """Wire the engine components around an injected state.

        Args:
            settings: Engine settings.
            state: Profiles, patterns and models the engine works from.
            store: Notification store.
            deliverer: Channel delivery.
            scheduler: Deferred and digest delivery.
        """
        self.settings = settings
        self.state = state
        self.store = store
        self.deliverer = deliverer
        self.scheduler = scheduler
        self.rate_limiter = RateLimiter(settings, store)
        self.calculator = PriorityCalculator(
            state.models, state.profiles, settings.priority_thresholds
        )
        self.timing_optimizer = DeliveryTimingOptimizer(
            state.profiles, state.patterns, settings.quiet_hours
        )
        self.personalizer = ContentPersonalizer(state.profiles)
        self.channel_selector = ChannelSelector(state.profiles, settings)

    async def initialize(self, now: datetime | None = None) -> bool:
        """Load engine state.

        A failure leaves the engine degraded rather than raising.

        Returns:
            True if the state loaded.
        """
        try:
            await self.state.load(now)
        except EngineStateError:
            logger.warning("engine_running_degraded", reason=self.state.last_error)
            return False
        return True

    async def send_smart_notification(
        self,
        request: SmartNotificationRequest,
        now: datetime | None = None,
    ) -> Notification:
        """Score, schedule and deliver one notification.

        Args:
            request: The validated notification request.
            now: Processing time, defaults to the current time.

        Returns:
            The stored notification. On any failure this is a basic
            notification, or an unsaved failed one if even that could not
            be stored.
        """
        now = now or timezone.now()
        log = logger.bind(
            user_id=request.recipient_user_id,
            notification_type=request.notification_type,
        )

        if self.state.degraded:
            log.warning("engine_degraded_basic_delivery")
            return await self.send_basic_notification(request, now)

        stage = "priority"
        notification: Notification | None = None
        try:
            priority = self.calculator.calculate(request, now)

            stage = "timing"
            timing = self.timing_optimizer.optimize(request, priority, now)

            stage = "personalization"
            content = self.personalizer.personalize(request, priority)

            stage = "channels"
            channels = self.channel_selector.select(request, priority)

            stage = "admission"
            notification, check = await self.store.create_admitted(
                request.recipient_user_id,
                now,
                self.rate_limiter,
                lambda check: self._admitted_fields(
                    request, priority, timing, content, channels, check, now
                ),
            )

            stage = "dispatch"
            notification = await self._dispatch(notification)
        except Exception as e:
            log.error(
                "smart_notification_failed",
                stage=stage,
                error=str(e),
                error_type=type(e).__name__,
            )
            if notification is not None:
                return notification
            return await self.send_basic_notification(request, now)

        log.info(
            "smart_notification_processed",
            notification_id=str(notification.notification_id),
            priority_level=priority.level.value,
            priority_score=round(priority.score, 2),
            reason=notification.ai_metadata.get("deliveryReason"),
            status=notification.status,
            rate_limited=notification.rate_limited,
            rate_limit_bypassed=notification.rate_limit_bypassed,
            hourly_count=check.hourly_count,
            daily_count=check.daily_count,
        )
        return notification

    def _admitted_fields(
        self,
        request: SmartNotificationRequest,
        priority: PriorityResult,
        timing: DeliveryTiming,
        content: PersonalizedContent,
        channels: list[DeliveryChannel],
        check: RateLimitCheck,
        now: datetime,
    ) -> dict[str, Any]:
        """Field values for an admitted notification given its rate window."""
        metadata = _ai_metadata(priority, timing, content)
        fields = {
            **_base_fields(request),
            "title": content.title,
            "priority_level": priority.level.value,
            "priority_score": priority.score,
            "delivery_channels": [channel.value for channel in channels],
            "ai_processed": True,
            "ai_metadata": metadata,
            "status": NotificationStatusEnum.PENDING.value,
            "scheduled_for": timing.scheduled_time,
        }

        if not check.allowed:
            metadata["rateLimit"] = check.model_dump(mode="json", by_alias=True)
            if priority.level == PriorityLevel.CRITICAL:
                fields["rate_limit_bypassed"] = True
            else:
                slot = self.rate_limiter.next_available_slot(check, now)
                if timing.scheduled_time is not None:
                    slot = max(slot, timing.scheduled_time)
                metadata["deliveryReason"] = DeliveryReason.RATE_LIMITED.value
                fields["rate_limited"] = True
                fields["scheduled_for"] = slot

        if fields["scheduled_for"] is not None:
            fields["status"] = NotificationStatusEnum.SCHEDULED.value
        elif (
            self.settings.batch_low_priority
            and priority.level == PriorityLevel.LOW
        ):
            metadata["deliveryReason"] = DeliveryReason.DIGEST_BATCHED.value
            fields["awaiting_digest"] = True
        return fields

    async def _dispatch(self, notification: Notification) -> Notification:
        if notification.status == NotificationStatusEnum.SCHEDULED.value:
            self.scheduler.schedule(notification.notification_id, notification.scheduled_for)
            return notification
        if notification.awaiting_digest:
            self.scheduler.enqueue_digest(
                notification.recipient_user_id, notification.notification_id
            )
            return notification
        return await self.deliverer.deliver(notification)

    async def send_basic_notification(
        self,
        request: SmartNotificationRequest,
        now: datetime | None = None,
    ) -> Notification:
        """Store and deliver a notification without engine decisions.

        Priority comes from the request's hint and delivery is immediate
        and in-app only. This method never raises.
        """
        priority = basic_priority(request)
        fields = {
            **_base_fields(request),
            "title": request.title,
            "priority_level": priority.level.value,
            "priority_score": priority.score,
            "delivery_channels": [DeliveryChannel.IN_APP.value],
            "ai_processed": False,
            "ai_metadata": {
                "confidence": priority.confidence,
                "deliveryReason": DeliveryReason.BASIC_FALLBACK.value,
            },
            "status": NotificationStatusEnum.PENDING.value,
        }

        notification: Notification | None = None
        try:
            notification = await self.store.create(fields)
            return await self.deliverer.deliver(notification)
        except Exception as e:
            logger.error(
                "basic_notification_failed",
                user_id=request.recipient_user_id,
                notification_type=request.notification_type,
                stored=notification is not None,
                error=str(e),
                error_type=type(e).__name__,
            )
            if notification is not None:
                return notification
            return Notification(
                **{**fields, "status": NotificationStatusEnum.FAILED.value},
                created_at=now or timezone.now(),
            )


def build_engine(
    settings: EngineSettings | None = None,
    store: NotificationStore | None = None,
    transports: list | None = None,
) -> SmartNotificationEngine:
    """Assemble an engine with fresh, unloaded state.

    Args:
        settings: Engine settings, read from Django settings when omitted.
        store: Notification store, a new one when omitted.
        transports: Channel transports; in-app, email and SMS by default.

    Returns:
        An engine that still needs ``initialize()``.
    """
    settings = settings or load_engine_settings()
    store = store or NotificationStore()
    if transports is None:
        transports = [InAppTransport(), EmailTransport(), SmsTransport()]
    deliverer = Deliverer(store, transports)
    return SmartNotificationEngine(
        settings=settings,
        state=EngineState(settings, store),
        store=store,
        deliverer=deliverer,
        scheduler=BatchScheduler(store, deliverer, settings),
    )


_engine: SmartNotificationEngine | None = None


def get_engine() -> SmartNotificationEngine:
    """Return the process-wide engine, building it on first use.

    The state is loaded lazily by the first caller that needs it
    (see ``ensure_engine_ready``).
    """
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = build_engine()
    return _engine


async def ensure_engine_ready() -> SmartNotificationEngine:
    """Return the process engine, loading its state on first use.

    A failed first load is not retried here; the engine stays degraded
    until ``refresh_engine_state_job`` or the refresh endpoint succeeds.
    """
    engine = get_engine()
    if not engine.state.load_attempted:
        await engine.initialize()
    return engine
