"""Tests for the smart notification pipeline."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

from django.test import TestCase
from django.utils import timezone

from asgiref.sync import sync_to_async

from engine.config import EngineSettings, QuietHours
from engine.constants import URGENCY_PREFIXES
from engine.enums import (
    DeliveryReason,
    NotificationStatusEnum,
    PriorityLevel,
)
from engine.models import Notification
from engine.services.smart_notification_engine import build_engine
from engine.services.transports import InAppTransport
from engine.time_windows import start_of_next_hour
from tests.factories import RecordingTransport, create_notification, notification_request

EVENING = datetime(2026, 3, 4, 19, 0, tzinfo=UTC)


class TestSmartNotificationEngine(TestCase):
    """Test suite for SmartNotificationEngine."""

    def setUp(self):
        """Set up an engine with quiet hours off and 2 notifications per hour."""
        self.email = RecordingTransport("email")
        self.engine = build_engine(
            settings=EngineSettings(
                quiet_hours=QuietHours(start=0, end=0),
                max_notifications_per_hour=2,
                max_notifications_per_day=10,
            ),
            transports=[InAppTransport(), self.email],
        )

    async def _fill_hourly_window(self, user_id, now):
        for _ in range(2):
            await sync_to_async(create_notification)(
                recipient_user_id=user_id,
                status=NotificationStatusEnum.SENT.value,
                sent_at=now,
            )

    async def test_model_scored_notification_is_delivered(self):
        """A modelled type is scored, explained and delivered."""
        await self.engine.initialize()
        request = notification_request(
            recipient_user_id="U1",
            recipient_email="u1@example.com",
            context={"daysUntilDue": 2, "assessmentPriority": "critical"},
        )

        notification = await self.engine.send_smart_notification(request, EVENING)

        self.assertTrue(notification.ai_processed)
        self.assertEqual(notification.priority_level, PriorityLevel.HIGH.value)
        self.assertAlmostEqual(notification.priority_score, 79.67, places=2)
        self.assertEqual(notification.delivery_channels, ["in_app", "email"])
        self.assertEqual(notification.status, NotificationStatusEnum.SENT.value)
        metadata = notification.ai_metadata
        self.assertEqual(metadata["deliveryReason"], "default_immediate")
        self.assertEqual(metadata["confidence"], 0.5)
        self.assertEqual(
            [item["factor"] for item in metadata["priorityFactors"]],
            ["daysUntilDue", "assessmentPriority"],
        )
        self.assertEqual(
            metadata["personalization"],
            {
                "includeDetails": False,
                "addUrgencyIndicator": False,
                "titleRewritten": False,
            },
        )
        self.assertEqual(len(self.email.delivered), 1)

    async def test_hourly_limit_reschedules_to_next_hour(self):
        """Over the hourly limit, delivery moves to the next hour."""
        await self.engine.initialize()
        self.engine.scheduler.running = True
        now = timezone.now()
        await self._fill_hourly_window("u1", now)
        request = notification_request(
            recipient_user_id="u1",
            notification_type="marketing",
            priority=PriorityLevel.MEDIUM,
        )

        notification = await self.engine.send_smart_notification(request, now)

        self.assertTrue(notification.rate_limited)
        self.assertEqual(notification.status, NotificationStatusEnum.SCHEDULED.value)
        self.assertEqual(notification.scheduled_for, start_of_next_hour(now))
        self.assertEqual(
            notification.ai_metadata["deliveryReason"],
            DeliveryReason.RATE_LIMITED.value,
        )
        self.assertEqual(notification.ai_metadata["rateLimit"]["hourlyCount"], 2)
        self.assertEqual(self.engine.scheduler.pending_counts()["scheduled"], 1)

    async def test_critical_bypasses_rate_limit(self):
        """Critical notifications are delivered even over the limit."""
        await self.engine.initialize()
        now = timezone.now()
        await self._fill_hourly_window("u1", now)
        request = notification_request(
            recipient_user_id="u1",
            notification_type="outage",
            priority=PriorityLevel.CRITICAL,
            recipient_email="u1@example.com",
        )

        notification = await self.engine.send_smart_notification(request, now)

        self.assertTrue(notification.rate_limit_bypassed)
        self.assertFalse(notification.rate_limited)
        self.assertEqual(notification.status, NotificationStatusEnum.SENT.value)
        self.assertEqual(notification.delivery_channels, ["in_app", "email"])

    async def test_low_priority_waits_for_digest(self):
        """Low notifications are held for the digest sweep."""
        await self.engine.initialize()
        self.engine.scheduler.running = True
        request = notification_request(
            notification_type="tips", priority=PriorityLevel.LOW
        )

        notification = await self.engine.send_smart_notification(request, EVENING)

        self.assertTrue(notification.awaiting_digest)
        self.assertEqual(notification.status, NotificationStatusEnum.PENDING.value)
        self.assertEqual(
            notification.ai_metadata["deliveryReason"],
            DeliveryReason.DIGEST_BATCHED.value,
        )
        self.assertEqual(self.engine.scheduler.pending_counts()["digest"], 1)

    async def test_low_priority_delivered_now_when_batching_disabled(self):
        """Without batching, low notifications go out immediately."""
        engine = build_engine(
            settings=EngineSettings(
                quiet_hours=QuietHours(start=0, end=0), batch_low_priority=False
            ),
            transports=[InAppTransport()],
        )
        await engine.initialize()

        notification = await engine.send_smart_notification(
            notification_request(notification_type="tips", priority=PriorityLevel.LOW),
            EVENING,
        )

        self.assertFalse(notification.awaiting_digest)
        self.assertEqual(notification.status, NotificationStatusEnum.SENT.value)

    async def test_quiet_hours_schedule_delivery(self):
        """Inside quiet hours a non-critical notification is scheduled."""
        engine = build_engine(
            settings=EngineSettings(quiet_hours=QuietHours(start=22, end=7)),
            transports=[InAppTransport()],
        )
        await engine.initialize()
        night = datetime(2026, 3, 4, 23, 0, tzinfo=UTC)

        notification = await engine.send_smart_notification(
            notification_request(
                notification_type="marketing", priority=PriorityLevel.HIGH
            ),
            night,
        )

        self.assertEqual(notification.status, NotificationStatusEnum.SCHEDULED.value)
        self.assertEqual(
            notification.scheduled_for, datetime(2026, 3, 5, 7, 0, tzinfo=UTC)
        )
        self.assertEqual(notification.ai_metadata["deliveryReason"], "quiet_hours")

    async def test_sweeps_in_another_process_deliver_web_notifications(self):
        """A web engine leaves deferred work in the store for the sweeping engine."""
        settings = EngineSettings(quiet_hours=QuietHours(start=22, end=7))
        web = build_engine(settings=settings, transports=[InAppTransport()])
        sweeper = build_engine(settings=settings, transports=[InAppTransport()])
        await web.initialize()
        night = datetime(2026, 3, 4, 23, 0, tzinfo=UTC)

        scheduled = [
            await web.send_smart_notification(
                notification_request(
                    notification_type="marketing", priority=PriorityLevel.HIGH
                ),
                night,
            )
            for _ in range(3)
        ]
        batched = await web.send_smart_notification(
            notification_request(notification_type="tips", priority=PriorityLevel.LOW),
            EVENING,
        )

        self.assertEqual(web.scheduler.pending_counts(), {"scheduled": 0, "digest": 0})

        delivered = await sweeper.scheduler.run_scheduled_sweep(
            datetime(2026, 3, 5, 7, 1, tzinfo=UTC)
        )
        await sweeper.scheduler.run_batch_sweep()

        self.assertEqual(delivered, 3)
        for notification in [*scheduled, batched]:
            await notification.arefresh_from_db()
            self.assertEqual(notification.status, NotificationStatusEnum.SENT.value)
        self.assertEqual(
            sweeper.scheduler.pending_counts(), {"scheduled": 0, "digest": 0}
        )

    async def test_degraded_engine_sends_basic_notification(self):
        """Without loaded state the request is delivered in-app as given."""
        request = notification_request(
            title="Plain title",
            priority=PriorityLevel.HIGH,
            context={"assessmentPriority": "critical"},
        )

        notification = await self.engine.send_smart_notification(request, EVENING)

        self.assertFalse(notification.ai_processed)
        self.assertEqual(notification.title, "Plain title")
        self.assertEqual(notification.priority_score, 70)
        self.assertEqual(notification.delivery_channels, ["in_app"])
        self.assertEqual(notification.status, NotificationStatusEnum.SENT.value)
        self.assertEqual(
            notification.ai_metadata["deliveryReason"],
            DeliveryReason.BASIC_FALLBACK.value,
        )

    async def test_stage_failure_falls_back_to_basic(self):
        """An error in any stage yields a basic notification."""
        await self.engine.initialize()

        with patch.object(
            self.engine.timing_optimizer, "optimize", side_effect=RuntimeError("boom")
        ):
            notification = await self.engine.send_smart_notification(
                notification_request(), EVENING
            )

        self.assertFalse(notification.ai_processed)
        self.assertEqual(notification.status, NotificationStatusEnum.SENT.value)
        self.assertEqual(await Notification.objects.acount(), 1)

    async def test_dispatch_failure_returns_stored_notification(self):
        """A failure after admission keeps the admitted row."""
        await self.engine.initialize()
        self.engine.deliverer.deliver = AsyncMock(side_effect=RuntimeError("down"))

        notification = await self.engine.send_smart_notification(
            notification_request(
                notification_type="marketing", priority=PriorityLevel.MEDIUM
            ),
            EVENING,
        )

        self.assertTrue(notification.ai_processed)
        self.assertEqual(notification.status, NotificationStatusEnum.PENDING.value)
        self.assertEqual(await Notification.objects.acount(), 1)

    async def test_basic_notification_never_raises(self):
        """When nothing can be stored an unsaved failed record is returned."""
        self.engine.store.create = AsyncMock(side_effect=ConnectionError("db down"))

        notification = await self.engine.send_basic_notification(
            notification_request()
        )

        self.assertEqual(notification.status, NotificationStatusEnum.FAILED.value)
        self.assertTrue(notification._state.adding)

    async def test_initialize_reports_failure(self):
        """initialize() returns False instead of raising."""
        self.engine.state.store = AsyncMock()
        self.engine.state.store.historical_interactions.side_effect = OSError("down")

        self.assertFalse(await self.engine.initialize())
        self.assertTrue(self.engine.state.degraded)

    async def test_refreshed_profiles_affect_scoring(self):
        """Profiles loaded on refresh are used by the next request."""
        sent = EVENING - timedelta(days=3)
        for _ in range(5):
            await sync_to_async(create_notification)(
                recipient_user_id="reader",
                notification_type="assessment_due",
                sent_at=sent,
                read_at=sent + timedelta(minutes=45),
            )
        await self.engine.initialize(EVENING)

        notification = await self.engine.send_smart_notification(
            notification_request(
                recipient_user_id="reader",
                context={"assessmentPriority": "medium"},
            ),
            EVENING,
        )

        # base 60 + factor 10 + engaged user 5 + engaged type 5
        self.assertEqual(notification.priority_score, 80)

    async def test_longest_title_is_stored_for_low_readers(self):
        """A prefixed maximum-length title is stored within the column."""
        sent = EVENING - timedelta(days=3)
        for _ in range(5):
            await sync_to_async(create_notification)(
                recipient_user_id="skimmer", sent_at=sent
            )
        await self.engine.initialize(EVENING)

        notification = await self.engine.send_smart_notification(
            notification_request(
                recipient_user_id="skimmer",
                notification_type="marketing",
                priority=PriorityLevel.HIGH,
                title="y" * 255,
            ),
            EVENING,
        )

        stored = await Notification.objects.aget(
            notification_id=notification.notification_id
        )
        self.assertEqual(len(stored.title), 255)
        prefix, _, rest = stored.title.partition(": ")
        self.assertIn(f"{prefix}:", URGENCY_PREFIXES.values())
        self.assertTrue(rest.startswith("y"))
        self.assertTrue(stored.ai_metadata["personalization"]["titleRewritten"])
