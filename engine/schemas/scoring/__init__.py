"""Priority scoring schemas."""

from engine.schemas.scoring.priority_model import (
    CategoricalFactor,
    NumericFactor,
    PriorityFactor,
    PriorityModel,
)
from engine.schemas.scoring.priority_result import FactorImpact, PriorityResult

__all__ = [
    "CategoricalFactor",
    "FactorImpact",
    "NumericFactor",
    "PriorityFactor",
    "PriorityModel",
    "PriorityResult",
]
