"""Smart notification model.

A single table holds incoming notifications, their engine decisions and
their delivery outcome. Digest notifications are rows as well; their
members point back at them through ``digest_parent_id``.
"""

import uuid
from typing import ClassVar

from django.db import models

from engine.enums import NotificationStatusEnum, PriorityLevel


class Notification(models.Model):
    """Notification scored, scheduled and delivered by the engine.

    Attributes:
        notification_id: Unique identifier for the notification.
        recipient_user_id: Identifier of the user receiving it.
        notification_type: Type that selected the priority model.
        title: Personalized title (urgency prefix applied if any).
        message: Notification body.
        priority_level: Level derived from the priority score.
        priority_score: Score in [0, 100].
        delivery_channels: Selected channels in canonical order.
        context_data: Factor values submitted with the request.
        ai_processed: False for basic fallback notifications.
        ai_metadata: Factor breakdown, confidence, timing reason and
            personalization flags.
        status: pending, scheduled, sent or failed.
        delivery_results: Per-channel ``{success, error}`` outcome.
        scheduled_for: Deferred delivery time, if any.
        sent_at: When at least one channel succeeded.
        read_at / clicked_at / dismissed_at: Acknowledgement timestamps.
    """

    notification_id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the notification",
    )
    recipient_user_id = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Identifier of the recipient user",
    )
    notification_type = models.CharField(
        max_length=50,
        help_text="Notification type selecting the priority model",
    )
    title = models.CharField(
        max_length=255,
        help_text="Personalized notification title",
    )
    message = models.TextField(
        help_text="Notification body",
    )
    priority_level = models.CharField(
        max_length=10,
        choices=[(level.value, level.value) for level in PriorityLevel],
        default=PriorityLevel.MEDIUM.value,
        help_text="Priority level derived from the score",
    )
    priority_score = models.FloatField(
        default=0.0,
        help_text="Priority score between 0 and 100",
    )
    delivery_channels = models.JSONField(
        default=list,
        help_text="Delivery channels in canonical order",
    )
    context_data = models.JSONField(
        default=dict,
        help_text="Factor values submitted with the request",
    )
    ai_processed = models.BooleanField(
        default=False,
        help_text="Whether the engine scored this notification",
    )
    ai_metadata = models.JSONField(
        default=dict,
        help_text="Factor breakdown, confidence and delivery decisions",
    )
    status = models.CharField(
        max_length=10,
        choices=[(item.value, item.value) for item in NotificationStatusEnum],
        default=NotificationStatusEnum.PENDING.value,
        help_text="Record lifecycle status",
    )
    delivery_results = models.JSONField(
        default=dict,
        help_text="Per-channel delivery outcome",
    )
    recipient_email = models.EmailField(
        null=True,
        blank=True,
        help_text="Address used by the email channel",
    )
    recipient_phone = models.CharField(
        max_length=32,
        null=True,
        blank=True,
        help_text="Phone number used by the SMS channel",
    )
    rate_limited = models.BooleanField(
        default=False,
        help_text="Rescheduled because the recipient hit a rate limit",
    )
    rate_limit_bypassed = models.BooleanField(
        default=False,
        help_text="Critical notification delivered despite the rate limit",
    )
    awaiting_digest = models.BooleanField(
        default=False,
        help_text="Queued for the next digest sweep",
    )
    is_digest = models.BooleanField(
        default=False,
        help_text="Whether this notification summarizes others",
    )
    digest_member_ids = models.JSONField(
        default=list,
        help_text="Notifications summarized by this digest",
    )
    digest_parent_id = models.UUIDField(
        null=True,
        blank=True,
        help_text="Digest that delivered this notification",
    )
    scheduled_for = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Deferred delivery time",
    )
    sent_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the notification was delivered",
    )
    read_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the recipient read the notification",
    )
    clicked_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the recipient clicked the notification",
    )
    dismissed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the recipient dismissed the notification",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the notification was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the notification was last updated",
    )

    class Meta:
        """Django model metadata."""

        db_table = "smart_notifications"
        ordering: ClassVar[list[str]] = ["-created_at"]
        indexes: ClassVar[list] = [
            models.Index(
                fields=["recipient_user_id", "sent_at"],
                name="smart_notif_user_sent_idx",
            ),
            models.Index(
                fields=["recipient_user_id", "created_at"],
                name="smart_notif_user_created_idx",
            ),
            models.Index(
                fields=["status", "scheduled_for"],
                name="smart_notif_status_sched_idx",
            ),
            models.Index(
                fields=["awaiting_digest", "status"],
                name="smart_notif_digest_idx",
            ),
        ]

    def __str__(self) -> str:
        """Return string representation of notification."""
        return f"{self.notification_type} for user {self.recipient_user_id}"

    def __repr__(self) -> str:
        """Return detailed representation of notification."""
        return (
            f"<Notification(id={self.notification_id}, "
            f"type={self.notification_type}, "
            f"user={self.recipient_user_id}, "
            f"priority={self.priority_level}, "
            f"status={self.status})>"
        )
