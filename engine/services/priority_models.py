"""Priority model registry and the models shipped with the service."""

from typing import Any

import structlog
from pydantic import ValidationError

from engine.exceptions import PriorityModelError
from engine.schemas.scoring import PriorityModel

logger = structlog.get_logger(__name__)

_LEVEL_MAPPING = {"critical": 1.0, "high": 0.8, "medium": 0.5, "low": 0.2}
_IMPACT_MAPPING = {"high": 1.0, "medium": 0.6, "low": 0.3}

DEFAULT_PRIORITY_MODELS: dict[str, dict[str, Any]] = {
    "assessment_due": {
        "baseScore": 60,
        "factors": {
            "daysUntilDue": {"kind": "numeric", "weight": -5, "max": 30},
            "assessmentPriority": {
                "kind": "categorical",
                "weight": 20,
                "mapping": _LEVEL_MAPPING,
            },
            "organizationRisk": {
                "kind": "categorical",
                "weight": 15,
                "mapping": _IMPACT_MAPPING,
            },
            "userRole": {
                "kind": "categorical",
                "weight": 10,
                "mapping": {"admin": 1.0, "manager": 0.8, "analyst": 0.6},
            },
        },
    },
    "workflow_assignment": {
        "baseScore": 50,
        "factors": {
            "workflowPriority": {
                "kind": "categorical",
                "weight": 25,
                "mapping": _LEVEL_MAPPING,
            },
            "userWorkload": {"kind": "numeric", "weight": -10, "max": 10},
            "deadline": {"kind": "numeric", "weight": -3, "max": 14},
            "assignerRole": {
                "kind": "categorical",
                "weight": 5,
                "mapping": {"admin": 1.0, "manager": 0.8},
            },
        },
    },
    "compliance_alert": {
        "baseScore": 80,
        "factors": {
            "riskLevel": {
                "kind": "categorical",
                "weight": 20,
                "mapping": _LEVEL_MAPPING,
            },
            "affectedSystems": {"kind": "numeric", "weight": 5, "max": 10},
            "regulatoryImpact": {
                "kind": "categorical",
                "weight": 15,
                "mapping": _IMPACT_MAPPING,
            },
        },
    },
    "system_notification": {
        "baseScore": 30,
        "factors": {
            "severity": {
                "kind": "categorical",
                "weight": 30,
                "mapping": {"error": 1.0, "warning": 0.6, "info": 0.2},
            },
            "userImpact": {
                "kind": "categorical",
                "weight": 20,
                "mapping": _IMPACT_MAPPING,
            },
        },
    },
}


def parse_priority_models(
    definitions: dict[str, dict[str, Any]],
) -> dict[str, PriorityModel]:
    """Validate raw model definitions.

    Args:
        definitions: Mapping of notification type to model definition.

    Returns:
        Validated models keyed by notification type.

    Raises:
        PriorityModelError: If any definition is invalid.
    """
    models = {}
    for notification_type, definition in definitions.items():
        try:
            models[notification_type] = PriorityModel.model_validate(definition)
        except ValidationError as e:
            raise PriorityModelError(notification_type, str(e)) from e
    return models


class PriorityModelRegistry:
    """Scoring models keyed by notification type."""

    def __init__(self, definitions: dict[str, dict[str, Any]] | None = None) -> None:
        """Initialize the registry.

        Args:
            definitions: Model definitions to load; the built-in models are
                used when None.
        """
        self._definitions = (
            definitions if definitions is not None else DEFAULT_PRIORITY_MODELS
        )
        self._models: dict[str, PriorityModel] = {}

    def load(self) -> int:
        """Validate and install the configured models.

        Returns:
            Number of models installed.

        Raises:
            PriorityModelError: If a definition is invalid; previously
                installed models are kept.
        """
        self._models = parse_priority_models(self._definitions)
        logger.info(
            "priority_models_loaded",
            model_count=len(self._models),
            notification_types=sorted(self._models),
        )
        return len(self._models)

    def get(self, notification_type: str) -> PriorityModel | None:
        """Return the model for ``notification_type``, if one is defined."""
        return self._models.get(notification_type)

    def __len__(self) -> int:
        """Return the number of installed models."""
        return len(self._models)
