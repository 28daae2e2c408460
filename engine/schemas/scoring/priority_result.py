"""Schemas for computed notification priorities."""

from typing import Any

from pydantic import Field

from engine.enums import PriorityLevel
from engine.schemas.base_schema_model import BaseSchemaModel


class FactorImpact(BaseSchemaModel):
    """Contribution of one model factor to a priority score."""

    factor: str
    value: Any
    weight: float
    impact: float


class PriorityResult(BaseSchemaModel):
    """Normalized score, its level and how it was reached."""

    score: float = Field(..., ge=0.0, le=100.0)
    level: PriorityLevel
    factor_breakdown: list[FactorImpact] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
