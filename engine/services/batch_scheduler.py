"""Deferred delivery queue and digest batching.

Scheduled notifications sit in a min-heap keyed by epoch minute; low
priority notifications wait per user in a digest queue. Both structures are
guarded by one thread lock because request handlers (on worker threads) add
to them while the sweep task drains them. They only take entries from the
engine while this process runs the sweep loop. The database stays the
source of truth: every sweep first loads due or pending rows from the store
into the queues, so work persisted by other processes is picked up as well.
"""

import asyncio
import heapq
import threading
from collections import defaultdict
from datetime import datetime
from uuid import UUID

from django.utils import timezone

import structlog

from engine.config import EngineSettings
from engine.enums import DeliveryChannel, DeliveryReason, NotificationStatusEnum
from engine.models import Notification
from engine.services.deliverer import Deliverer
from engine.services.notification_store import NotificationStore
from engine.time_windows import epoch_minute

logger = structlog.get_logger(__name__)


def group_similar(
    notifications: list[Notification],
) -> list[list[Notification]]:
    """Group one user's notifications by (type, priority level).

    Groups keep first-seen order, as do the notifications inside them.
    """
    groups: dict[tuple[str, str], list[Notification]] = {}
    for notification in notifications:
        key = (notification.notification_type, notification.priority_level)
        groups.setdefault(key, []).append(notification)
    return list(groups.values())


def digest_fields(members: list[Notification]) -> dict:
    """Model field values for a digest summarizing ``members``."""
    first = members[0]
    count = len(members)
    selected = {channel for member in members for channel in member.delivery_channels}
    return {
        "recipient_user_id": first.recipient_user_id,
        "notification_type": first.notification_type,
        "title": f"{count} {first.notification_type} notifications",
        "message": f"You have {count} pending {first.notification_type} notifications.",
        "priority_level": first.priority_level,
        "priority_score": max(member.priority_score for member in members),
        "delivery_channels": [
            channel.value for channel in DeliveryChannel if channel.value in selected
        ],
        "context_data": {},
        "ai_processed": True,
        "ai_metadata": {
            "deliveryReason": DeliveryReason.DIGEST_BATCHED.value,
            "digestSize": count,
        },
        "status": NotificationStatusEnum.PENDING.value,
        "recipient_email": next(
            (m.recipient_email for m in members if m.recipient_email), None
        ),
        "recipient_phone": next(
            (m.recipient_phone for m in members if m.recipient_phone), None
        ),
        "is_digest": True,
        "digest_member_ids": [str(member.notification_id) for member in members],
    }


class BatchScheduler:
    """Runs the scheduled-delivery sweep and the digest sweep.

    The engine hands deferred and digest notifications to the in-memory
    queues only while this process runs ``run``. Otherwise the stored row is
    the hand-off and whichever process sweeps picks it up from the store.
    """

    def __init__(
        self,
        store: NotificationStore,
        deliverer: Deliverer,
        settings: EngineSettings,
    ) -> None:
        """Initialize the scheduler.

        Args:
            store: Notification store, the source of truth for due rows.
            deliverer: Delivers notifications and digests.
            settings: Sweep intervals.
        """
        self.store = store
        self.deliverer = deliverer
        self.scheduled_interval = settings.scheduled_check_interval_seconds
        self.batching_interval = settings.batching_window_seconds
        self.running = False
        self._lock = threading.Lock()
        self._schedule: list[tuple[int, str]] = []
        self._scheduled_ids: set[str] = set()
        self._digest_queue: dict[str, list[str]] = defaultdict(list)
        self._stop_event = asyncio.Event()

    def schedule(self, notification_id: UUID | str, deliver_at: datetime) -> None:
        """Queue a notification for delivery at ``deliver_at``.

        Ignored unless the sweep loop runs in this process.
        """
        if self.running:
            self._push_scheduled(str(notification_id), deliver_at)

    def enqueue_digest(self, user_id: str, notification_id: UUID | str) -> None:
        """Queue a notification for the user's next digest.

        Ignored unless the sweep loop runs in this process.
        """
        if self.running:
            self._push_digest(user_id, str(notification_id))

    def pending_counts(self) -> dict[str, int]:
        """Sizes of the in-memory queues."""
        with self._lock:
            return {
                "scheduled": len(self._schedule),
                "digest": sum(len(ids) for ids in self._digest_queue.values()),
            }

    def _push_scheduled(self, notification_id: str, deliver_at: datetime) -> None:
        with self._lock:
            if notification_id in self._scheduled_ids:
                return
            self._scheduled_ids.add(notification_id)
            heapq.heappush(self._schedule, (epoch_minute(deliver_at), notification_id))

    def _push_digest(self, user_id: str, notification_id: str) -> None:
        with self._lock:
            queue = self._digest_queue[user_id]
            if notification_id not in queue:
                queue.append(notification_id)

    def _pop_due(self, minute: int) -> list[str]:
        due = []
        with self._lock:
            while self._schedule and self._schedule[0][0] <= minute:
                notification_id = heapq.heappop(self._schedule)[1]
                self._scheduled_ids.discard(notification_id)
                due.append(notification_id)
        return due

    def _drain_digest_queue(self) -> dict[str, list[str]]:
        with self._lock:
            queued = dict(self._digest_queue)
            self._digest_queue.clear()
        return queued

    def _clear(self) -> None:
        with self._lock:
            self._schedule.clear()
            self._scheduled_ids.clear()
            self._digest_queue.clear()

    async def run_scheduled_sweep(self, now: datetime | None = None) -> int:
        """Deliver every scheduled notification that is due.

        Due rows from the store join the heap first, so rows scheduled by
        other processes are delivered in the same pass.

        Args:
            now: Sweep time, defaults to the current time.

        Returns:
            Number of notifications delivered.
        """
        now = now or timezone.now()
        for notification in await self.store.due_scheduled(now):
            self._push_scheduled(
                str(notification.notification_id), notification.scheduled_for
            )

        delivered = 0
        for notification_id in self._pop_due(epoch_minute(now)):
            claimed = False
            try:
                if not await self.store.claim_scheduled(notification_id):
                    continue
                claimed = True
                notification = await self.store.get(notification_id)
                await self.deliverer.deliver(notification)
                delivered += 1
            except Exception as e:
                if claimed:
                    await self.store.release_scheduled(notification_id)
                logger.error(
                    "scheduled_delivery_failed",
                    notification_id=notification_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        if delivered:
            logger.info("scheduled_sweep_completed", delivered_count=delivered)
        return delivered

    async def run_batch_sweep(self, now: datetime | None = None) -> int:
        """Deliver pending digest notifications, collapsing similar ones.

        Pending rows from the store join the digest queue, then the queue is
        drained user by user. Per user, notifications are grouped by type
        and priority level. A group of one is delivered as is; larger groups
        become one digest notification whose members are linked to it.
        Queued ids that are no longer pending are dropped.

        Args:
            now: Sweep time, defaults to the current time.

        Returns:
            Number of digests created.
        """
        now = now or timezone.now()
        pending = {
            str(notification.notification_id): notification
            for notification in await self.store.pending_digest()
            if notification.created_at <= now
        }
        for notification_id, notification in pending.items():
            self._push_digest(notification.recipient_user_id, notification_id)

        digests = 0
        for user_id, queued_ids in self._drain_digest_queue().items():
            notifications = [pending[nid] for nid in queued_ids if nid in pending]
            for group in group_similar(notifications):
                try:
                    if len(group) == 1:
                        await self.deliverer.deliver(group[0])
                        continue
                    digest = await self.store.create(digest_fields(group))
                    delivered = await self.deliverer.deliver(digest)
                    await self.store.attach_to_digest(
                        [member.notification_id for member in group],
                        digest.notification_id,
                        delivered.status,
                        delivered.sent_at,
                    )
                    digests += 1
                    logger.info(
                        "digest_delivered",
                        user_id=user_id,
                        notification_type=group[0].notification_type,
                        digest_id=str(digest.notification_id),
                        member_count=len(group),
                        status=delivered.status,
                    )
                except Exception as e:
                    logger.error(
                        "digest_delivery_failed",
                        user_id=user_id,
                        notification_type=group[0].notification_type,
                        error=str(e),
                        error_type=type(e).__name__,
                    )

        if pending:
            logger.info(
                "batch_sweep_completed",
                pending_count=len(pending),
                digest_count=digests,
            )
        return digests

    async def run(self) -> None:
        """Run both sweeps until ``stop`` is called.

        Sweeps execute one at a time on this task, so they never overlap.
        A failing sweep is logged and retried on its next interval.
        """
        self.running = True
        try:
            await self._loop()
        finally:
            self.running = False
            self._clear()

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_scheduled = loop.time()
        next_batch = loop.time() + self.batching_interval
        logger.info(
            "batch_scheduler_started",
            scheduled_interval_seconds=self.scheduled_interval,
            batching_interval_seconds=self.batching_interval,
        )

        while not self._stop_event.is_set():
            if loop.time() >= next_scheduled:
                await self._guarded(self.run_scheduled_sweep, "scheduled")
                next_scheduled = loop.time() + self.scheduled_interval
            if loop.time() >= next_batch:
                await self._guarded(self.run_batch_sweep, "batch")
                next_batch = loop.time() + self.batching_interval

            timeout = max(0.0, min(next_scheduled, next_batch) - loop.time())
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
            except TimeoutError:
                pass

        logger.info("batch_scheduler_stopped")

    def stop(self) -> None:
        """Ask a running ``run`` loop to exit after its current sweep."""
        self._stop_event.set()

    async def _guarded(self, sweep, name: str) -> None:
        try:
            await sweep()
        except Exception as e:
            logger.error(
                "sweep_failed", sweep=name, error=str(e), error_type=type(e).__name__
            )
