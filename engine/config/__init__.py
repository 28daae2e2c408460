"""Configuration helpers for the engine app."""

from engine.config.engine_settings import (
    EngineSettings,
    PriorityThresholds,
    QuietHours,
    load_engine_settings,
)

__all__ = [
    "EngineSettings",
    "PriorityThresholds",
    "QuietHours",
    "load_engine_settings",
]
