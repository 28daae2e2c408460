"""Schema for submitting a notification to the smart notification engine."""

from typing import Any

from pydantic import ConfigDict, EmailStr, Field

from engine.enums import PriorityLevel
from engine.schemas.base_schema_model import BaseSchemaModel


class SmartNotificationRequest(BaseSchemaModel):
    """Notification event submitted by the surrounding application.

    ``context`` carries the factor values expected by the priority model of
    ``notification_type`` (for example ``daysUntilDue`` or ``riskLevel``).
    The request is immutable once validated.
    """

    model_config = ConfigDict(frozen=True)

    notification_type: str = Field(
        ...,
        alias="type",
        min_length=1,
        max_length=50,
        description="Notification type, selects the priority model",
    )
    recipient_user_id: str = Field(
        ..., min_length=1, max_length=64, description="Recipient user identifier"
    )
    title: str = Field(..., min_length=1, max_length=255, description="Title")
    message: str = Field(..., min_length=1, description="Notification body")
    priority: PriorityLevel | None = Field(
        None, description="Caller's priority hint, used when no model matches"
    )
    context: dict[str, Any] = Field(
        default_factory=dict, description="Factor values for priority scoring"
    )
    recipient_email: EmailStr | None = Field(
        None, description="Address used by the email channel"
    )
    recipient_phone: str | None = Field(
        None, max_length=32, description="Phone number used by the SMS channel"
    )
