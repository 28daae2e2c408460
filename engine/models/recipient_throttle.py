"""Per-recipient lock row used to serialize rate-limit admission."""

from django.db import models


class RecipientThrottle(models.Model):
    """Row locked while a recipient's rate window is counted and updated.

    Admission runs in a transaction that selects this row FOR UPDATE, so two
    requests for the same user cannot both take the last free slot.
    """

    user_id = models.CharField(
        max_length=64,
        primary_key=True,
        help_text="Identifier of the recipient user",
    )
    last_admitted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When a notification was last admitted for this user",
    )

    class Meta:
        """Django model metadata."""

        db_table = "smart_notification_throttles"

    def __str__(self) -> str:
        """Return string representation of the throttle row."""
        return f"throttle for user {self.user_id}"
