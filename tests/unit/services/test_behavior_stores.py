"""Tests for behaviour profiles and global engagement patterns."""

from datetime import UTC, datetime, timedelta

from django.test import SimpleTestCase

from engine.enums import PriorityLevel
from engine.schemas.behavior import HourlyStat
from engine.services.pattern_catalog import (
    PatternCatalog,
    best_delivery_hours,
    build_pattern,
)
from engine.services.profile_store import ProfileStore, build_user_profile
from tests.factories import interaction

MONDAY_MORNING = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


class TestBuildUserProfile(SimpleTestCase):
    """Test suite for build_user_profile."""

    def test_aggregates_rates_and_response_time(self):
        """Read and click rates are fractions of all delivered notifications."""
        history = [
            interaction("u1", MONDAY_MORNING, minutes_to_read=10, clicked=True),
            interaction("u1", MONDAY_MORNING, minutes_to_read=30),
            interaction("u1", MONDAY_MORNING),
            interaction("u1", MONDAY_MORNING),
        ]

        profile = build_user_profile("u1", history)

        self.assertEqual(profile.total_notifications, 4)
        self.assertEqual(profile.read_rate, 0.5)
        self.assertEqual(profile.click_rate, 0.25)
        self.assertEqual(profile.avg_response_minutes, 20)

    def test_preferred_hours_ranked_by_read_volume(self):
        """Hours with more reads come first; ties keep ascending order."""
        history = [
            interaction("u1", MONDAY_MORNING.replace(hour=15), minutes_to_read=5),
            interaction("u1", MONDAY_MORNING.replace(hour=15), minutes_to_read=5),
            interaction("u1", MONDAY_MORNING.replace(hour=11), minutes_to_read=5),
            interaction("u1", MONDAY_MORNING.replace(hour=8), minutes_to_read=5),
            # Unread notifications never make an hour preferred
            interaction("u1", MONDAY_MORNING.replace(hour=6)),
        ]

        profile = build_user_profile("u1", history)

        self.assertEqual(profile.preferred_hours, [15, 8, 11])

    def test_preferred_hours_capped_at_six(self):
        """At most six preferred hours are kept."""
        history = [
            interaction("u1", MONDAY_MORNING.replace(hour=hour), minutes_to_read=1)
            for hour in range(8, 18)
        ]

        profile = build_user_profile("u1", history)

        self.assertEqual(profile.preferred_hours, [8, 9, 10, 11, 12, 13])

    def test_preferred_days_use_sunday_as_zero(self):
        """Days of week count from Sunday."""
        sunday = MONDAY_MORNING - timedelta(days=1)
        history = [
            interaction("u1", sunday, minutes_to_read=5),
            interaction("u1", sunday, minutes_to_read=5),
            interaction("u1", MONDAY_MORNING, minutes_to_read=5),
        ]

        profile = build_user_profile("u1", history)

        self.assertEqual(profile.preferred_days, [0, 1])

    def test_per_type_and_priority_engagement(self):
        """Engagement is broken down by type and by level."""
        history = [
            interaction("u1", MONDAY_MORNING, "assessment_due", minutes_to_read=5),
            interaction("u1", MONDAY_MORNING, "assessment_due"),
            interaction(
                "u1",
                MONDAY_MORNING,
                "compliance_alert",
                PriorityLevel.CRITICAL,
                minutes_to_read=2,
            ),
        ]

        profile = build_user_profile("u1", history)

        self.assertEqual(profile.per_type_engagement["assessment_due"].read_rate, 0.5)
        self.assertEqual(profile.per_type_engagement["assessment_due"].count, 2)
        self.assertEqual(profile.per_type_engagement["compliance_alert"].read_rate, 1.0)
        critical = profile.per_priority_engagement[PriorityLevel.CRITICAL]
        self.assertEqual(critical.avg_response_minutes, 2)


class TestProfileStore(SimpleTestCase):
    """Test suite for ProfileStore."""

    def test_load_groups_by_user(self):
        """One profile is built per user."""
        store = ProfileStore()

        count = store.load(
            [
                interaction("u1", MONDAY_MORNING, minutes_to_read=1),
                interaction("u2", MONDAY_MORNING),
            ]
        )

        self.assertEqual(count, 2)
        self.assertEqual(store.get("u1").read_rate, 1.0)
        self.assertEqual(store.get("u2").read_rate, 0.0)
        self.assertIsNone(store.get("u3"))

    def test_reload_replaces_all_profiles(self):
        """Users missing from the new history disappear."""
        store = ProfileStore()
        store.load([interaction("u1", MONDAY_MORNING)])

        store.load([interaction("u2", MONDAY_MORNING)])

        self.assertIsNone(store.get("u1"))
        self.assertEqual(len(store), 1)


class TestPatternCatalog(SimpleTestCase):
    """Test suite for global engagement patterns."""

    def test_best_hours_weigh_read_rate_and_speed(self):
        """Score is readRate*0.7 + (1 - minutes/60)*0.3."""
        stats = {
            9: HourlyStat(total_count=10, read_rate=0.9, click_rate=0, avg_response_minutes=30),
            14: HourlyStat(total_count=10, read_rate=0.8, click_rate=0, avg_response_minutes=0),
            20: HourlyStat(total_count=10, read_rate=0.2, click_rate=0, avg_response_minutes=0),
        }

        # 9: 0.63 + 0.15 = 0.78, 14: 0.56 + 0.3 = 0.86, 20: 0.14 + 0.3 = 0.44
        self.assertEqual(best_delivery_hours(stats), [14, 9, 20])

    def test_best_hours_capped_at_four(self):
        """At most four best hours are kept."""
        stats = {
            hour: HourlyStat(total_count=1, read_rate=1.0, click_rate=0)
            for hour in range(6)
        }

        self.assertEqual(best_delivery_hours(stats), [0, 1, 2, 3])

    def test_build_pattern_hourly_stats(self):
        """Hourly stats count reads and clicks per sent hour."""
        records = [
            interaction("u1", MONDAY_MORNING, minutes_to_read=10, clicked=True),
            interaction("u2", MONDAY_MORNING),
            interaction("u3", MONDAY_MORNING.replace(hour=16), minutes_to_read=2),
        ]

        pattern = build_pattern(records)

        self.assertEqual(pattern.total_samples, 3)
        self.assertEqual(pattern.hourly_stats[9].read_rate, 0.5)
        self.assertEqual(pattern.hourly_stats[9].click_rate, 0.5)
        self.assertEqual(pattern.hourly_stats[9].avg_response_minutes, 10)
        self.assertEqual(pattern.best_hours, [16, 9])

    def test_catalog_keys_by_type_and_level(self):
        """Patterns are looked up by notification type and priority level."""
        catalog = PatternCatalog()

        catalog.load(
            [
                interaction("u1", MONDAY_MORNING, "digest", PriorityLevel.LOW),
                interaction("u2", MONDAY_MORNING, "digest", PriorityLevel.HIGH),
            ]
        )

        self.assertEqual(len(catalog), 2)
        self.assertIsNotNone(catalog.get("digest", PriorityLevel.LOW))
        self.assertIsNone(catalog.get("digest", PriorityLevel.MEDIUM))
