"""Schema for delivery timing decisions."""

from datetime import datetime

from pydantic import Field

from engine.enums import DeliveryReason
from engine.schemas.base_schema_model import BaseSchemaModel


class DeliveryTiming(BaseSchemaModel):
    """Whether to deliver now, and if not, when."""

    immediate: bool
    scheduled_time: datetime | None = Field(
        None, description="Deferred delivery time, always in the future"
    )
    reason: DeliveryReason
