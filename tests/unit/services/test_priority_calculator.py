"""Tests for priority scoring."""

from datetime import UTC, datetime

from django.test import SimpleTestCase

from engine.config import PriorityThresholds
from engine.enums import PriorityLevel
from engine.schemas.behavior import TypeEngagement
from engine.services.priority_calculator import (
    PriorityCalculator,
    basic_priority,
    clamp_score,
    context_adjustment,
    user_adjustment,
)
from engine.services.priority_models import PriorityModelRegistry
from engine.services.profile_store import ProfileStore
from tests.factories import behavior_profile, notification_request, profile_store

EVENING = datetime(2026, 3, 4, 19, 0, tzinfo=UTC)
AFTERNOON = datetime(2026, 3, 4, 14, 0, tzinfo=UTC)
NOON = datetime(2026, 3, 4, 12, 0, tzinfo=UTC)
LATE_NIGHT = datetime(2026, 3, 4, 23, 0, tzinfo=UTC)


def _profile(user_id, read_rate, type_read_rate=None):
    per_type = {}
    if type_read_rate is not None:
        per_type["assessment_due"] = TypeEngagement(read_rate=type_read_rate, count=20)
    return behavior_profile(
        user_id, read_rate=read_rate, per_type_engagement=per_type
    )


class TestPriorityCalculator(SimpleTestCase):
    """Test suite for PriorityCalculator."""

    def setUp(self):
        """Set up a calculator with the built-in models."""
        self.models = PriorityModelRegistry()
        self.models.load()
        self.calculator = PriorityCalculator(
            self.models, ProfileStore(), PriorityThresholds()
        )

    def test_assessment_due_example_scores_high(self):
        """Base 60, two days to due and critical priority score about 79.67."""
        request = notification_request(
            recipient_user_id="U1",
            context={"daysUntilDue": 2, "assessmentPriority": "critical"},
        )

        result = self.calculator.calculate(request, EVENING)

        self.assertAlmostEqual(result.score, 60 - 5 * 2 / 30 + 20, places=2)
        self.assertEqual(result.level, PriorityLevel.HIGH)
        self.assertEqual(
            [item.factor for item in result.factor_breakdown],
            ["daysUntilDue", "assessmentPriority"],
        )
        self.assertAlmostEqual(result.factor_breakdown[0].impact, -1 / 3)
        self.assertEqual(result.factor_breakdown[1].impact, 20)
        self.assertEqual(result.confidence, 0.5)

    def test_missing_factors_are_left_out_of_breakdown(self):
        """Factors absent from the context contribute nothing."""
        request = notification_request(
            notification_type="compliance_alert", context={"riskLevel": "high"}
        )

        result = self.calculator.calculate(request, EVENING)

        self.assertEqual(len(result.factor_breakdown), 1)
        self.assertAlmostEqual(result.score, 80 + 20 * 0.8)
        self.assertEqual(result.level, PriorityLevel.CRITICAL)

    def test_score_is_clamped_to_100(self):
        """Scores never exceed 100."""
        request = notification_request(
            notification_type="compliance_alert",
            context={
                "riskLevel": "critical",
                "affectedSystems": 50,
                "regulatoryImpact": "high",
            },
        )

        result = self.calculator.calculate(request, AFTERNOON)

        self.assertEqual(result.score, 100)
        self.assertEqual(result.confidence, 1.0)

    def test_unknown_category_normalizes_to_zero(self):
        """Categories missing from the mapping have no impact."""
        request = notification_request(context={"assessmentPriority": "unheard-of"})

        result = self.calculator.calculate(request, EVENING)

        self.assertEqual(result.factor_breakdown[0].impact, 0)
        self.assertEqual(result.score, 60)

    def test_non_finite_numeric_values_normalize_to_zero(self):
        """NaN and infinite numbers contribute nothing to the score."""
        for value in ("nan", "NaN", "inf", float("nan"), float("-inf")):
            with self.subTest(value=value):
                request = notification_request(context={"daysUntilDue": value})

                result = self.calculator.calculate(request, NOON)

                self.assertEqual(result.factor_breakdown[0].impact, 0)
                self.assertEqual(result.score, 65)
                self.assertEqual(result.level, PriorityLevel.MEDIUM)

    def test_type_without_model_uses_priority_hint(self):
        """Unknown types get the basic score of their hint."""
        request = notification_request(
            notification_type="marketing", priority=PriorityLevel.HIGH
        )

        result = self.calculator.calculate(request, EVENING)

        self.assertEqual(result.score, 70)
        self.assertEqual(result.level, PriorityLevel.HIGH)
        self.assertEqual(result.factor_breakdown, [])

    def test_engaged_user_in_business_hours_gets_all_boosts(self):
        """Engaged user, engaged type and business hours each add 5."""
        engaged = _profile("engaged", read_rate=0.9, type_read_rate=0.85)
        calculator = PriorityCalculator(
            self.models, profile_store(engaged), PriorityThresholds()
        )
        request = notification_request(
            recipient_user_id="engaged", context={"assessmentPriority": "medium"}
        )

        result = calculator.calculate(request, AFTERNOON)

        self.assertAlmostEqual(result.score, 60 + 10 + 5 + 5 + 5)

    def test_disengaged_user_at_night_is_penalized(self):
        """Low read rates and off hours lower the score."""
        disengaged = _profile("quiet", read_rate=0.1, type_read_rate=0.1)
        calculator = PriorityCalculator(
            self.models, profile_store(disengaged), PriorityThresholds()
        )
        request = notification_request(
            recipient_user_id="quiet", context={"assessmentPriority": "medium"}
        )

        result = calculator.calculate(request, LATE_NIGHT)

        self.assertAlmostEqual(result.score, 60 + 10 - 10 - 5 - 10)
        self.assertEqual(result.level, PriorityLevel.MEDIUM)


class TestScoreAdjustments(SimpleTestCase):
    """Test suite for the adjustment helpers."""

    def test_user_adjustment_without_type_history(self):
        """Only the overall read rate applies when the type is unseen."""
        self.assertEqual(user_adjustment(_profile("u", 0.95), "assessment_due"), 5)
        self.assertEqual(user_adjustment(_profile("u", 0.5), "assessment_due"), 0)

    def test_context_adjustment_business_hours(self):
        """Hours 9 through 17 add 5."""
        self.assertEqual(context_adjustment(50, 9), 5)
        self.assertEqual(context_adjustment(50, 17), 5)
        self.assertEqual(context_adjustment(50, 18), 0)

    def test_context_adjustment_spares_high_scores(self):
        """Off-hours penalty applies only below 80."""
        self.assertEqual(context_adjustment(79, 23), -10)
        self.assertEqual(context_adjustment(80, 23), 0)
        self.assertEqual(context_adjustment(50, 6), -10)

    def test_clamp_score(self):
        """Scores are kept in 0-100 and NaN becomes 0."""
        self.assertEqual(clamp_score(120), 100)
        self.assertEqual(clamp_score(-5), 0)
        self.assertEqual(clamp_score(float("nan")), 0)
        self.assertEqual(clamp_score(42.5), 42.5)

    def test_basic_priority_defaults_to_medium(self):
        """A request without hint is medium with half confidence."""
        result = basic_priority(notification_request(notification_type="unknown"))

        self.assertEqual(result.level, PriorityLevel.MEDIUM)
        self.assertEqual(result.score, 50)
        self.assertEqual(result.confidence, 0.5)
