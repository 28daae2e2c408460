"""Schema for one historical notification interaction."""

from datetime import datetime

from pydantic import Field

from engine.enums import PriorityLevel
from engine.schemas.base_schema_model import BaseSchemaModel


class InteractionRecord(BaseSchemaModel):
    """A delivered notification and what the recipient did with it.

    Built from the notification store. ``sent_hour`` and ``sent_day_of_week``
    use local time; days count from 0 (Sunday) to 6 (Saturday).
    """

    recipient_user_id: str
    notification_type: str
    priority_level: PriorityLevel
    sent_at: datetime
    sent_hour: int = Field(..., ge=0, le=23)
    sent_day_of_week: int = Field(..., ge=0, le=6)
    was_read: bool
    was_clicked: bool
    minutes_to_read: float | None = None
