"""Declarative priority scoring models.

A model is a base score plus named factors. Each factor is a tagged value,
either numeric (normalized against a ceiling) or categorical (mapped through
a lookup table), so invalid configurations fail validation at load time.
"""

import math
from typing import Annotated, Any, Literal

from pydantic import Field

from engine.schemas.base_schema_model import BaseSchemaModel


class NumericFactor(BaseSchemaModel):
    """Factor whose context value is a number capped at ``max``."""

    kind: Literal["numeric"] = "numeric"
    weight: float
    max: float = Field(..., gt=0)

    def normalize(self, value: Any) -> float:
        """Return ``min(value, max) / max``, or 0.0 for non-numeric values.

        NaN and infinities count as non-numeric.
        """
        if isinstance(value, bool):
            return 0.0
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(number):
            return 0.0
        return min(number, self.max) / self.max


class CategoricalFactor(BaseSchemaModel):
    """Factor whose context value is looked up in ``mapping``."""

    kind: Literal["categorical"] = "categorical"
    weight: float
    mapping: dict[str, float] = Field(..., min_length=1)

    def normalize(self, value: Any) -> float:
        """Return the mapped value, or 0.0 for unknown categories."""
        return self.mapping.get(str(value), 0.0)


PriorityFactor = Annotated[
    NumericFactor | CategoricalFactor, Field(discriminator="kind")
]


class PriorityModel(BaseSchemaModel):
    """Scoring model for one notification type."""

    base_score: float = Field(..., ge=0.0, le=100.0)
    factors: dict[str, PriorityFactor] = Field(default_factory=dict)
