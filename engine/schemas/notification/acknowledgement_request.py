"""Schema for acknowledging a delivered notification."""

from datetime import datetime

from pydantic import Field

from engine.enums import AcknowledgementEvent
from engine.schemas.base_schema_model import BaseSchemaModel


class AcknowledgementRequest(BaseSchemaModel):
    """Read/click/dismiss feedback reported by the UI or a channel callback."""

    event: AcknowledgementEvent = Field(..., description="Feedback event type")
    occurred_at: datetime | None = Field(
        None, description="When the event happened (defaults to now)"
    )
