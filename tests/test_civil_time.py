"""
Tests for civil-time conversion.
"""

import pendulum

from freebusy.domain.civil_time import (
    CivilTime,
    PendulumTimeZoneService,
    add_days_to_date,
    civil_time_at,
    get_time_zone_service,
    instant_from_civil,
    iso_weekday,
    midnight_instant,
    offset_minutes,
    parse_date,
    parse_instant,
    set_time_zone_service,
    sunday_weekday,
)


def _utc(*args) -> int:
    return pendulum.datetime(*args, tz="UTC").int_timestamp * 1000


class TestInstantFromCivil:
    """Tests for resolving wall-clock times to instants."""

    def test_new_year_midnight_in_new_york(self):
        """Midnight EST is 05:00 UTC."""
        assert instant_from_civil(CivilTime(2025, 1, 1), "America/New_York") == _utc(2025, 1, 1, 5)

    def test_summer_time_uses_daylight_offset(self):
        assert instant_from_civil(CivilTime(2025, 7, 1, 9, 0), "America/New_York") == _utc(2025, 7, 1, 13)

    def test_fractional_offset_zone(self):
        """Kathmandu is UTC+05:45."""
        assert instant_from_civil(CivilTime(2025, 6, 15, 12, 0), "Asia/Kathmandu") == _utc(2025, 6, 15, 6, 15)

    def test_round_trip_ordinary_times(self):
        """Civil -> instant -> civil is the identity outside gap/ambiguous hours."""
        cases = [
            (CivilTime(2025, 12, 29, 9, 15), "America/New_York"),
            (CivilTime(2026, 3, 8, 3, 30), "America/New_York"),  # right after spring-forward
            (CivilTime(2026, 3, 8, 1, 59), "America/New_York"),  # right before spring-forward
            (CivilTime(2026, 11, 1, 2, 30), "America/New_York"),  # right after fall-back
            (CivilTime(2026, 3, 8, 0, 0), "America/Los_Angeles"),
            (CivilTime(2025, 6, 30, 23, 45), "Pacific/Honolulu"),
            (CivilTime(2025, 2, 28, 18, 0), "Asia/Kathmandu"),
        ]
        for civil, zone in cases:
            assert civil_time_at(instant_from_civil(civil, zone), zone) == civil

    def test_spring_forward_gap_keeps_trial_offset_resolution(self):
        """
        02:30 does not exist on 2026-03-08 in New York. The offset at the
        naive trial instant is EST, so the time resolves to 07:30 UTC,
        which reads back as 03:30 EDT.
        """
        instant = instant_from_civil(CivilTime(2026, 3, 8, 2, 30), "America/New_York")

        assert instant == _utc(2026, 3, 8, 7, 30)
        assert civil_time_at(instant, "America/New_York") == CivilTime(2026, 3, 8, 3, 30)

    def test_fall_back_ambiguous_time_resolves_to_first_occurrence(self):
        """01:30 happens twice on 2026-11-01; the EDT reading wins."""
        instant = instant_from_civil(CivilTime(2026, 11, 1, 1, 30), "America/New_York")

        assert instant == _utc(2026, 11, 1, 5, 30)
        assert offset_minutes(instant, "America/New_York") == -240


class TestCivilTimeAt:
    """Tests for reading instants as wall-clock time."""

    def test_offsets_follow_daylight_saving(self):
        assert offset_minutes(_utc(2025, 1, 15, 12), "America/New_York") == -300
        assert offset_minutes(_utc(2025, 7, 15, 12), "America/New_York") == -240
        assert offset_minutes(_utc(2025, 7, 15, 12), "America/Phoenix") == -420

    def test_transition_day_rebase_is_viewer_zone_specific(self):
        """
        Instants just after New York springs forward are still on standard
        time in Chicago and fall on the previous evening in Los Angeles.
        """
        first, second = _utc(2026, 3, 8, 6, 30), _utc(2026, 3, 8, 7, 30)

        assert civil_time_at(first, "America/Chicago").minute_of_day == 30
        assert civil_time_at(second, "America/Chicago").minute_of_day == 90

        assert civil_time_at(first, "America/Los_Angeles") == CivilTime(2026, 3, 7, 22, 30)
        assert civil_time_at(second, "America/Los_Angeles").minute_of_day == 23 * 60 + 30

    def test_seconds_are_kept(self):
        civil = civil_time_at(_utc(2025, 12, 29, 14, 5, 42), "America/New_York")
        assert (civil.hour, civil.minute, civil.second) == (9, 5, 42)


class TestWeekdays:
    """Tests for zone-aware weekday numbering."""

    def test_iso_weekday_depends_on_zone(self):
        """03:00 UTC on Monday is still Sunday evening in New York."""
        instant = _utc(2025, 12, 29, 3)

        assert iso_weekday(instant, "UTC") == 1
        assert iso_weekday(instant, "America/New_York") == 7

    def test_sunday_based_numbering(self):
        instant = _utc(2025, 12, 28, 12)

        assert sunday_weekday(instant, "UTC") == 0
        assert sunday_weekday(_utc(2026, 1, 3, 12), "UTC") == 6


class TestDateHelpers:
    """Tests for date-string parsing and arithmetic."""

    def test_parse_date_is_strict(self):
        assert parse_date("2025-12-29") == pendulum.date(2025, 12, 29)
        assert parse_date("2025-1-1") is None
        assert parse_date("2025-02-30") is None
        assert parse_date("not a date") is None
        assert parse_date(None) is None

    def test_add_days_crosses_months_and_years(self):
        assert add_days_to_date("2025-12-31", 1) == "2026-01-01"
        assert add_days_to_date("2026-03-01", -1) == "2026-02-28"
        assert add_days_to_date("2026-03-07", 2) == "2026-03-09"

    def test_midnight_instant(self):
        assert midnight_instant("2025-12-29", "America/New_York") == _utc(2025, 12, 29, 5)
        assert midnight_instant("bad", "America/New_York") is None


class TestParseInstant:
    """Tests for ISO-8601 instant parsing."""

    def test_utc_and_offset_forms(self):
        assert parse_instant("2025-12-29T15:00:00.000Z") == _utc(2025, 12, 29, 15)
        assert parse_instant("2025-12-29T10:00:00-05:00") == _utc(2025, 12, 29, 15)

    def test_milliseconds_are_kept(self):
        assert parse_instant("2025-12-29T15:00:00.250Z") == _utc(2025, 12, 29, 15) + 250

    def test_invalid_values(self):
        assert parse_instant("garbage") is None
        assert parse_instant("") is None
        assert parse_instant(None) is None


class StubZoneService:
    """Fixed-offset service standing in for a real zone database."""

    def civil_time_at(self, instant, zone):
        return PendulumTimeZoneService().civil_time_at(instant + 3_600_000, "UTC")

    def instant_from_civil(self, civil, zone):
        return PendulumTimeZoneService().instant_from_civil(civil, "UTC") - 3_600_000

    def offset_minutes(self, instant, zone):
        return 60


def test_time_zone_service_can_be_swapped():
    """Module-level helpers delegate to the configured service."""
    original = get_time_zone_service()
    set_time_zone_service(StubZoneService())
    try:
        assert offset_minutes(0, "Anywhere") == 60
        assert instant_from_civil(CivilTime(1970, 1, 1, 1), "Anywhere") == 0
    finally:
        set_time_zone_service(original)

    assert offset_minutes(_utc(2025, 1, 15), "America/New_York") == -300
