"""Durable storage of smart notifications and their delivery outcome.

The store is the only component that talks to the database. Methods are
coroutines; multi-statement operations run in one transaction inside
``sync_to_async`` so they execute on a single thread and connection.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

import structlog
from asgiref.sync import sync_to_async

from engine.enums import AcknowledgementEvent, NotificationStatusEnum
from engine.exceptions import NotificationNotFoundError
from engine.models import Notification, RecipientThrottle
from engine.schemas.behavior import InteractionRecord
from engine.schemas.delivery import ChannelResult, RateLimitCheck
from engine.services.rate_limiter import RateLimiter
from engine.time_windows import day_of_week, local_hour

logger = structlog.get_logger(__name__)


def _window_filter(user_id: str, since: datetime) -> Q:
    """Notifications that count against a user's rate window.

    Delivered notifications count by delivery time. Notifications admitted
    for immediate delivery but not delivered yet count by creation time.
    Digest rows are excluded since each member is counted itself.
    """
    return Q(recipient_user_id=user_id, is_digest=False) & (
        Q(sent_at__gte=since)
        | Q(sent_at__isnull=True, scheduled_for__isnull=True, created_at__gte=since)
    )


class NotificationStore:
    """Django ORM backed repository for ``Notification`` rows."""

    async def create(self, fields: dict[str, Any]) -> Notification:
        """Insert a notification.

        Args:
            fields: Model field values.

        Returns:
            The created notification.
        """
        notification = await Notification.objects.acreate(**fields)
        logger.debug(
            "notification_created",
            notification_id=str(notification.notification_id),
            user_id=notification.recipient_user_id,
            status=notification.status,
        )
        return notification

    async def create_admitted(
        self,
        user_id: str,
        now: datetime,
        limiter: RateLimiter,
        build: Callable[[RateLimitCheck], dict[str, Any]],
    ) -> tuple[Notification, RateLimitCheck]:
        """Count the user's rate window and insert atomically.

        The recipient's throttle row is locked for the duration of the
        transaction, so concurrent admissions for one user are serialized.

        Args:
            user_id: Recipient user id.
            now: Admission time.
            limiter: Limiter that evaluates the counts.
            build: Turns the rate-limit outcome into model field values.

        Returns:
            The created notification and the rate-limit outcome it saw.
        """
        return await sync_to_async(self._create_admitted)(user_id, now, limiter, build)

    def _create_admitted(
        self,
        user_id: str,
        now: datetime,
        limiter: RateLimiter,
        build: Callable[[RateLimitCheck], dict[str, Any]],
    ) -> tuple[Notification, RateLimitCheck]:
        hour_start, day_start = limiter.windows(now)
        with transaction.atomic():
            throttle, _ = RecipientThrottle.objects.select_for_update().get_or_create(
                user_id=user_id
            )
            check = limiter.evaluate(
                Notification.objects.filter(_window_filter(user_id, hour_start)).count(),
                Notification.objects.filter(_window_filter(user_id, day_start)).count(),
            )
            notification = Notification.objects.create(**build(check))
            throttle.last_admitted_at = now
            throttle.save(update_fields=["last_admitted_at"])
        return notification, check

    async def get(self, notification_id: UUID | str) -> Notification:
        """Fetch a notification by id.

        Raises:
            NotificationNotFoundError: If no such notification exists.
        """
        try:
            return await Notification.objects.aget(notification_id=notification_id)
        except (Notification.DoesNotExist, DjangoValidationError, ValueError) as e:
            raise NotificationNotFoundError(str(notification_id)) from e

    async def record_delivery_result(
        self,
        notification_id: UUID,
        results: dict[str, ChannelResult],
        now: datetime | None = None,
    ) -> Notification:
        """Store per-channel outcomes and settle the notification status.

        Results are merged into earlier ones, so channels delivered by a
        previous attempt keep their entry. The notification is ``sent`` if
        any channel of this attempt succeeded, ``failed`` otherwise.

        Args:
            notification_id: Notification that was delivered.
            results: Outcome per channel name.
            now: Delivery time, defaults to the current time.

        Returns:
            The updated notification.
        """
        return await sync_to_async(self._record_delivery_result)(
            notification_id, results, now or timezone.now()
        )

    def _record_delivery_result(
        self,
        notification_id: UUID,
        results: dict[str, ChannelResult],
        now: datetime,
    ) -> Notification:
        with transaction.atomic():
            try:
                notification = Notification.objects.select_for_update().get(
                    notification_id=notification_id
                )
            except Notification.DoesNotExist as e:
                raise NotificationNotFoundError(str(notification_id)) from e

            merged = dict(notification.delivery_results or {})
            merged.update(
                {channel: result.model_dump() for channel, result in results.items()}
            )
            succeeded = any(result.success for result in results.values())

            notification.delivery_results = merged
            notification.awaiting_digest = False
            if succeeded:
                notification.status = NotificationStatusEnum.SENT.value
                notification.sent_at = now
            else:
                notification.status = NotificationStatusEnum.FAILED.value
            notification.save(
                update_fields=[
                    "delivery_results",
                    "awaiting_digest",
                    "status",
                    "sent_at",
                    "updated_at",
                ]
            )
        return notification

    async def count_notifications(self, user_id: str, since: datetime) -> int:
        """Count notifications charged to the user's rate window since ``since``."""
        return await Notification.objects.filter(
            _window_filter(user_id, since)
        ).acount()

    async def historical_interactions(self, since: datetime) -> list[InteractionRecord]:
        """Delivered notifications since ``since`` with their engagement.

        Args:
            since: Oldest delivery time to include.

        Returns:
            One interaction record per delivered notification, newest first.
        """
        records = []
        queryset = (
            Notification.objects.filter(sent_at__gte=since)
            .order_by("-sent_at")
            .only(
                "recipient_user_id",
                "notification_type",
                "priority_level",
                "sent_at",
                "read_at",
                "clicked_at",
            )
        )
        async for row in queryset:
            minutes_to_read = (
                (row.read_at - row.sent_at).total_seconds() / 60
                if row.read_at is not None
                else None
            )
            records.append(
                InteractionRecord(
                    recipient_user_id=row.recipient_user_id,
                    notification_type=row.notification_type,
                    priority_level=row.priority_level,
                    sent_at=row.sent_at,
                    sent_hour=local_hour(row.sent_at),
                    sent_day_of_week=day_of_week(row.sent_at),
                    was_read=row.read_at is not None,
                    was_clicked=row.clicked_at is not None,
                    minutes_to_read=minutes_to_read,
                )
            )
        return records

    async def due_scheduled(self, now: datetime) -> list[Notification]:
        """Scheduled notifications whose delivery time has come."""
        return [
            notification
            async for notification in Notification.objects.filter(
                status=NotificationStatusEnum.SCHEDULED.value,
                scheduled_for__lte=now,
            ).order_by("scheduled_for")
        ]

    async def claim_scheduled(self, notification_id: UUID) -> bool:
        """Move a scheduled notification to pending before delivering it.

        Returns:
            True if this caller claimed it, False if it was no longer
            scheduled (already delivered by another sweep).
        """
        updated = await Notification.objects.filter(
            notification_id=notification_id,
            status=NotificationStatusEnum.SCHEDULED.value,
        ).aupdate(
            status=NotificationStatusEnum.PENDING.value, updated_at=timezone.now()
        )
        return updated == 1

    async def release_scheduled(self, notification_id: UUID | str) -> None:
        """Return a claimed notification to ``scheduled`` after a failed delivery.

        Only rows still pending are touched, so a delivery that did record
        its outcome is never undone.
        """
        await Notification.objects.filter(
            notification_id=notification_id,
            status=NotificationStatusEnum.PENDING.value,
        ).aupdate(
            status=NotificationStatusEnum.SCHEDULED.value, updated_at=timezone.now()
        )
        logger.warning(
            "scheduled_notification_released", notification_id=str(notification_id)
        )

    async def pending_digest(self) -> list[Notification]:
        """Notifications waiting for the next digest sweep, oldest first."""
        return [
            notification
            async for notification in Notification.objects.filter(
                awaiting_digest=True,
                status=NotificationStatusEnum.PENDING.value,
            ).order_by("created_at")
        ]

    async def attach_to_digest(
        self,
        member_ids: list[UUID],
        digest_id: UUID,
        status: NotificationStatusEnum | str,
        sent_at: datetime | None = None,
    ) -> int:
        """Link digest members to their digest and copy its outcome.

        Members of a sent digest take its delivery time, so they count
        against the rate window by ``sent_at`` like any delivered row.

        Returns:
            Number of members updated.
        """
        return await Notification.objects.filter(
            notification_id__in=member_ids
        ).aupdate(
            digest_parent_id=digest_id,
            awaiting_digest=False,
            status=NotificationStatusEnum(status).value,
            sent_at=sent_at,
            updated_at=timezone.now(),
        )

    async def acknowledge(
        self,
        notification_id: UUID | str,
        event: AcknowledgementEvent,
        occurred_at: datetime | None = None,
    ) -> Notification:
        """Record a read, click or dismiss event.

        The first timestamp of each kind wins. A click also marks the
        notification as read.

        Raises:
            NotificationNotFoundError: If no such notification exists.
        """
        notification = await self.get(notification_id)
        moment = occurred_at or timezone.now()

        changed = []
        if event in (AcknowledgementEvent.READ, AcknowledgementEvent.CLICKED):
            if notification.read_at is None:
                notification.read_at = moment
                changed.append("read_at")
        if event == AcknowledgementEvent.CLICKED and notification.clicked_at is None:
            notification.clicked_at = moment
            changed.append("clicked_at")
        if event == AcknowledgementEvent.DISMISSED and notification.dismissed_at is None:
            notification.dismissed_at = moment
            changed.append("dismissed_at")

        if changed:
            await notification.asave(update_fields=[*changed, "updated_at"])
            logger.info(
                "notification_acknowledged",
                notification_id=str(notification.notification_id),
                user_id=notification.recipient_user_id,
                event=event.value,
            )
        return notification

    async def list_for_user(self, user_id: str, limit: int = 50) -> list[Notification]:
        """Most recent notifications of a user, newest first."""
        return [
            notification
            async for notification in Notification.objects.filter(
                recipient_user_id=user_id
            ).order_by("-created_at")[:limit]
        ]
