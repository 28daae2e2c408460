"""Schema for per-user rate limit checks."""

from pydantic import Field

from engine.schemas.base_schema_model import BaseSchemaModel


class RateLimitCheck(BaseSchemaModel):
    """Current hourly/daily notification counts for a user against limits."""

    allowed: bool
    hourly_count: int = Field(..., ge=0)
    daily_count: int = Field(..., ge=0)
    hourly_limit: int = Field(..., ge=1)
    daily_limit: int = Field(..., ge=1)

    @property
    def daily_exhausted(self) -> bool:
        """Whether the daily limit has been reached."""
        return self.daily_count >= self.daily_limit

    @property
    def hourly_exhausted(self) -> bool:
        """Whether the hourly limit has been reached."""
        return self.hourly_count >= self.hourly_limit
