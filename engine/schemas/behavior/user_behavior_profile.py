"""Per-user engagement profile schemas."""

from pydantic import Field

from engine.enums import PriorityLevel
from engine.schemas.base_schema_model import BaseSchemaModel


class TypeEngagement(BaseSchemaModel):
    """How a user engages with one notification type."""

    read_rate: float = Field(..., ge=0.0, le=1.0)
    count: int = Field(..., ge=0)


class PriorityEngagement(BaseSchemaModel):
    """How a user engages with one priority level."""

    read_rate: float = Field(..., ge=0.0, le=1.0)
    avg_response_minutes: float = Field(0.0, ge=0.0)
    count: int = Field(..., ge=0)


class UserBehaviorProfile(BaseSchemaModel):
    """Aggregated engagement statistics for a single user.

    ``preferred_hours`` and ``preferred_days`` are ranked by historical read
    volume, most engaged first.
    """

    user_id: str
    total_notifications: int = Field(..., ge=0)
    read_rate: float = Field(..., ge=0.0, le=1.0)
    click_rate: float = Field(..., ge=0.0, le=1.0)
    avg_response_minutes: float = Field(0.0, ge=0.0)
    preferred_hours: list[int] = Field(default_factory=list, max_length=6)
    preferred_days: list[int] = Field(default_factory=list, max_length=7)
    per_type_engagement: dict[str, TypeEngagement] = Field(default_factory=dict)
    per_priority_engagement: dict[PriorityLevel, PriorityEngagement] = Field(
        default_factory=dict
    )
