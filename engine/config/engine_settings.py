"""Typed view of the ``SMART_NOTIFICATIONS`` Django setting.

The setting is a plain dict with upper-case keys (Django convention). It is
parsed into an immutable ``EngineSettings`` so the engine components never
touch ``django.conf.settings`` directly and tests can build their own.
"""

from typing import Any

from django.conf import settings

from pydantic import BaseModel, ConfigDict, Field, model_validator

from engine.enums import PriorityLevel


class QuietHours(BaseModel):
    """Local-time window in which only critical notifications go out."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(22, ge=0, le=23)
    end: int = Field(7, ge=0, le=23)

    def contains(self, hour: int) -> bool:
        """Return True if ``hour`` falls inside the quiet window.

        A window whose start is after its end wraps midnight (22-7 covers
        22:00-06:59). Equal start and end disables quiet hours.
        """
        if self.start == self.end:
            return False
        if self.start > self.end:
            return hour >= self.start or hour < self.end
        return self.start <= hour < self.end


class PriorityThresholds(BaseModel):
    """Minimum scores for each priority level."""

    model_config = ConfigDict(frozen=True)

    critical: float = Field(90, ge=0, le=100)
    high: float = Field(70, ge=0, le=100)
    medium: float = Field(40, ge=0, le=100)
    low: float = Field(20, ge=0, le=100)

    @model_validator(mode="after")
    def _check_order(self) -> "PriorityThresholds":
        if not self.critical >= self.high >= self.medium >= self.low:
            raise ValueError("priority thresholds must be descending")
        return self

    def level_for(self, score: float) -> PriorityLevel:
        """Map a 0-100 score to its priority level."""
        if score >= self.critical:
            return PriorityLevel.CRITICAL
        if score >= self.high:
            return PriorityLevel.HIGH
        if score >= self.medium:
            return PriorityLevel.MEDIUM
        return PriorityLevel.LOW


class EngineSettings(BaseModel):
    """Static, process-wide configuration of the smart notification engine."""

    model_config = ConfigDict(frozen=True)

    max_notifications_per_hour: int = Field(5, ge=1)
    max_notifications_per_day: int = Field(20, ge=1)
    quiet_hours: QuietHours = Field(default_factory=QuietHours)
    batching_window_ms: int = Field(300_000, ge=1_000)
    scheduled_check_interval_seconds: int = Field(60, ge=1)
    priority_thresholds: PriorityThresholds = Field(
        default_factory=PriorityThresholds
    )
    sms_enabled: bool = False
    batch_low_priority: bool = True
    profile_history_days: int = Field(180, ge=1)
    pattern_history_days: int = Field(90, ge=1)
    priority_models: dict[str, dict[str, Any]] | None = None

    @property
    def batching_window_seconds(self) -> float:
        """Batching window expressed in seconds."""
        return self.batching_window_ms / 1000


def load_engine_settings() -> EngineSettings:
    """Build ``EngineSettings`` from ``settings.SMART_NOTIFICATIONS``.

    Returns:
        Parsed settings; missing keys fall back to defaults.

    Raises:
        pydantic.ValidationError: If the setting holds invalid values.
    """
    raw = getattr(settings, "SMART_NOTIFICATIONS", {}) or {}
    return EngineSettings(**{key.lower(): value for key, value in raw.items()})
