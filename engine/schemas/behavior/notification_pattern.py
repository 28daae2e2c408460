"""Global engagement pattern schemas."""

from pydantic import Field

from engine.schemas.base_schema_model import BaseSchemaModel


class HourlyStat(BaseSchemaModel):
    """Engagement for one hour of the day."""

    total_count: int = Field(..., ge=0)
    read_rate: float = Field(..., ge=0.0, le=1.0)
    click_rate: float = Field(..., ge=0.0, le=1.0)
    avg_response_minutes: float = Field(0.0, ge=0.0)


class NotificationPattern(BaseSchemaModel):
    """Cross-user statistics for a (notification type, priority level) pair."""

    hourly_stats: dict[int, HourlyStat] = Field(default_factory=dict)
    best_hours: list[int] = Field(default_factory=list, max_length=4)
    total_samples: int = Field(0, ge=0)
