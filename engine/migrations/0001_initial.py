import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "notification_id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the notification",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "recipient_user_id",
                    models.CharField(
                        db_index=True,
                        help_text="Identifier of the recipient user",
                        max_length=64,
                    ),
                ),
                (
                    "notification_type",
                    models.CharField(
                        help_text="Notification type selecting the priority model",
                        max_length=50,
                    ),
                ),
                (
                    "title",
                    models.CharField(
                        help_text="Personalized notification title", max_length=255
                    ),
                ),
                ("message", models.TextField(help_text="Notification body")),
                (
                    "priority_level",
                    models.CharField(
                        choices=[
                            ("low", "low"),
                            ("medium", "medium"),
                            ("high", "high"),
                            ("critical", "critical"),
                        ],
                        default="medium",
                        help_text="Priority level derived from the score",
                        max_length=10,
                    ),
                ),
                (
                    "priority_score",
                    models.FloatField(
                        default=0.0, help_text="Priority score between 0 and 100"
                    ),
                ),
                (
                    "delivery_channels",
                    models.JSONField(
                        default=list, help_text="Delivery channels in canonical order"
                    ),
                ),
                (
                    "context_data",
                    models.JSONField(
                        default=dict,
                        help_text="Factor values submitted with the request",
                    ),
                ),
                (
                    "ai_processed",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the engine scored this notification",
                    ),
                ),
                (
                    "ai_metadata",
                    models.JSONField(
                        default=dict,
                        help_text="Factor breakdown, confidence and delivery decisions",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "pending"),
                            ("scheduled", "scheduled"),
                            ("sent", "sent"),
                            ("failed", "failed"),
                        ],
                        default="pending",
                        help_text="Record lifecycle status",
                        max_length=10,
                    ),
                ),
                (
                    "delivery_results",
                    models.JSONField(
                        default=dict, help_text="Per-channel delivery outcome"
                    ),
                ),
                (
                    "recipient_email",
                    models.EmailField(
                        blank=True,
                        help_text="Address used by the email channel",
                        max_length=254,
                        null=True,
                    ),
                ),
                (
                    "recipient_phone",
                    models.CharField(
                        blank=True,
                        help_text="Phone number used by the SMS channel",
                        max_length=32,
                        null=True,
                    ),
                ),
                (
                    "rate_limited",
                    models.BooleanField(
                        default=False,
                        help_text="Rescheduled because the recipient hit a rate limit",
                    ),
                ),
                (
                    "rate_limit_bypassed",
                    models.BooleanField(
                        default=False,
                        help_text="Critical notification delivered despite the rate limit",
                    ),
                ),
                (
                    "awaiting_digest",
                    models.BooleanField(
                        default=False, help_text="Queued for the next digest sweep"
                    ),
                ),
                (
                    "is_digest",
                    models.BooleanField(
                        default=False,
                        help_text="Whether this notification summarizes others",
                    ),
                ),
                (
                    "digest_member_ids",
                    models.JSONField(
                        default=list,
                        help_text="Notifications summarized by this digest",
                    ),
                ),
                (
                    "digest_parent_id",
                    models.UUIDField(
                        blank=True,
                        help_text="Digest that delivered this notification",
                        null=True,
                    ),
                ),
                (
                    "scheduled_for",
                    models.DateTimeField(
                        blank=True, help_text="Deferred delivery time", null=True
                    ),
                ),
                (
                    "sent_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the notification was delivered",
                        null=True,
                    ),
                ),
                (
                    "read_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the recipient read the notification",
                        null=True,
                    ),
                ),
                (
                    "clicked_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the recipient clicked the notification",
                        null=True,
                    ),
                ),
                (
                    "dismissed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the recipient dismissed the notification",
                        null=True,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        help_text="When the notification was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="When the notification was last updated",
                    ),
                ),
            ],
            options={
                "db_table": "smart_notifications",
                "ordering": ["-created_at"],
                "indexes": [
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
                ],
            },
        ),
        migrations.CreateModel(
            name="RecipientThrottle",
            fields=[
                (
                    "user_id",
                    models.CharField(
                        help_text="Identifier of the recipient user",
                        max_length=64,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "last_admitted_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When a notification was last admitted for this user",
                        null=True,
                    ),
                ),
            ],
            options={
                "db_table": "smart_notification_throttles",
            },
        ),
    ]
