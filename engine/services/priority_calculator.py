"""Priority scoring for incoming notifications."""

import math
from datetime import datetime

from engine.config import PriorityThresholds
from engine.constants import (
    BASIC_PRIORITY_CONFIDENCE,
    BASIC_PRIORITY_SCORES,
    BUSINESS_HOURS_END,
    BUSINESS_HOURS_START,
    HIGH_ENGAGEMENT_READ_RATE,
    LOW_ENGAGEMENT_READ_RATE,
    OFF_HOURS_AFTER,
    OFF_HOURS_BEFORE,
    OFF_HOURS_SCORE_CEILING,
    TYPE_BOOST_READ_RATE,
    TYPE_PENALTY_READ_RATE,
)
from engine.enums import PriorityLevel
from engine.schemas.behavior import UserBehaviorProfile
from engine.schemas.notification import SmartNotificationRequest
from engine.schemas.scoring import FactorImpact, PriorityModel, PriorityResult
from engine.services.priority_models import PriorityModelRegistry
from engine.services.profile_store import ProfileStore
from engine.time_windows import local_hour


def basic_priority(request: SmartNotificationRequest) -> PriorityResult:
    """Score a request from its priority hint alone.

    Used for notification types without a model and for fallback delivery.
    """
    level = request.priority or PriorityLevel.MEDIUM
    return PriorityResult(
        score=BASIC_PRIORITY_SCORES[level],
        level=level,
        factor_breakdown=[],
        confidence=BASIC_PRIORITY_CONFIDENCE,
    )


def user_adjustment(
    profile: UserBehaviorProfile, notification_type: str
) -> float:
    """Score delta from the user's overall and per-type read rates."""
    delta = 0.0
    if profile.read_rate > HIGH_ENGAGEMENT_READ_RATE:
        delta += 5
    if profile.read_rate < LOW_ENGAGEMENT_READ_RATE:
        delta -= 10

    type_engagement = profile.per_type_engagement.get(notification_type)
    if type_engagement is not None:
        if type_engagement.read_rate > TYPE_BOOST_READ_RATE:
            delta += 5
        elif type_engagement.read_rate < TYPE_PENALTY_READ_RATE:
            delta -= 5
    return delta


def context_adjustment(score: float, hour: int) -> float:
    """Score delta from the local hour of day.

    Business hours (9-17 inclusive) add 5. Off hours (before 8 or after 20)
    subtract 10 unless the score is already 80 or more.
    """
    delta = 0.0
    if BUSINESS_HOURS_START <= hour <= BUSINESS_HOURS_END:
        delta += 5
    if (hour < OFF_HOURS_BEFORE or hour > OFF_HOURS_AFTER) and (
        score + delta < OFF_HOURS_SCORE_CEILING
    ):
        delta -= 10
    return delta


def clamp_score(score: float) -> float:
    """Clamp a score to 0-100; a score that is not a number becomes 0."""
    if math.isnan(score):
        return 0.0
    return max(0.0, min(100.0, score))


class PriorityCalculator:
    """Turns a request into a 0-100 score, a level and an explanation.

    Scoring reads the model registry and the profile store but never
    writes, so a calculator can be shared across concurrent requests.
    """

    def __init__(
        self,
        models: PriorityModelRegistry,
        profiles: ProfileStore,
        thresholds: PriorityThresholds,
    ) -> None:
        """Initialize the calculator.

        Args:
            models: Scoring models per notification type.
            profiles: Behaviour profiles used for user adjustments.
            thresholds: Score thresholds for each level.
        """
        self.models = models
        self.profiles = profiles
        self.thresholds = thresholds

    def calculate(
        self, request: SmartNotificationRequest, now: datetime
    ) -> PriorityResult:
        """Score a request.

        Args:
            request: The notification request.
            now: Current time; only its local hour is used.

        Returns:
            The priority result. Types without a model get the basic score.
        """
        model = self.models.get(request.notification_type)
        if model is None:
            return basic_priority(request)

        breakdown = self._factor_impacts(model, request.context)
        score = model.base_score + sum(item.impact for item in breakdown)

        profile = self.profiles.get(request.recipient_user_id)
        if profile is not None:
            score += user_adjustment(profile, request.notification_type)

        score += context_adjustment(score, local_hour(now))
        score = clamp_score(score)

        return PriorityResult(
            score=score,
            level=self.thresholds.level_for(score),
            factor_breakdown=breakdown,
            confidence=self._confidence(model, breakdown),
        )

    @staticmethod
    def _factor_impacts(
        model: PriorityModel, context: dict
    ) -> list[FactorImpact]:
        impacts = []
        for name, factor in model.factors.items():
            value = context.get(name)
            if value is None:
                continue
            impacts.append(
                FactorImpact(
                    factor=name,
                    value=value,
                    weight=factor.weight,
                    impact=factor.weight * factor.normalize(value),
                )
            )
        return impacts

    @staticmethod
    def _confidence(model: PriorityModel, breakdown: list[FactorImpact]) -> float:
        # Confidence reflects how many declared factors were supplied
        if not model.factors:
            return 1.0
        return len(breakdown) / len(model.factors)
