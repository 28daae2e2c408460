"""Schema for a persisted smart notification."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from engine.enums import NotificationStatusEnum, PriorityLevel
from engine.schemas.base_schema_model import BaseSchemaModel


class NotificationDetail(BaseSchemaModel):
    """Notification record as returned to API callers."""

    notification_id: UUID = Field(..., description="Notification identifier")
    recipient_user_id: str = Field(..., description="Recipient user identifier")
    notification_type: str = Field(..., description="Notification type")
    title: str = Field(..., description="Delivered title")
    message: str = Field(..., description="Delivered message")
    priority_level: PriorityLevel = Field(..., description="Priority level")
    priority_score: float = Field(..., ge=0.0, le=100.0, description="Score")
    delivery_channels: list[str] = Field(..., description="Selected channels")
    context_data: dict[str, Any] = Field(..., description="Request context")
    ai_processed: bool = Field(..., description="Whether the engine scored it")
    ai_metadata: dict[str, Any] = Field(..., description="Engine decisions")
    status: NotificationStatusEnum = Field(..., description="Record status")
    delivery_results: dict[str, Any] = Field(..., description="Per-channel outcome")
    rate_limited: bool = Field(..., description="Rescheduled by the rate limiter")
    rate_limit_bypassed: bool = Field(..., description="Critical limiter bypass")
    is_digest: bool = Field(..., description="Whether this is a digest")
    digest_member_ids: list[str] = Field(..., description="Digest members")
    scheduled_for: datetime | None = Field(None, description="Deferred time")
    sent_at: datetime | None = Field(None, description="When delivered")
    read_at: datetime | None = Field(None, description="When read")
    clicked_at: datetime | None = Field(None, description="When clicked")
    created_at: datetime | None = Field(None, description="When recorded")
