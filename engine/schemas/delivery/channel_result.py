"""Schema for a single channel delivery outcome."""

from pydantic import Field

from engine.schemas.base_schema_model import BaseSchemaModel


class ChannelResult(BaseSchemaModel):
    """Outcome reported by one channel transport."""

    success: bool
    error: str | None = Field(None, description="Failure reason, if any")
