"""
Conversion between UTC instants and civil (wall-clock) time in IANA zones.

Instants are plain integers: milliseconds since the Unix epoch. Civil times
are always derived from an instant and a zone, never stored as the source
of truth. Everything else in the domain layer builds on this module.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Protocol

import pendulum
from pendulum import Date, DateTime

Instant = int

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE

_YMD_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")


@dataclass(frozen=True)
class CivilTime:
    """Wall-clock reading of an instant in some time zone."""
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def date_string(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


class TimeZoneConversionService(Protocol):
    """Protocol describing the civil-time capability needed by the domain."""

    def civil_time_at(self, instant: Instant, zone: str) -> CivilTime:
        """Return the wall-clock reading of ``instant`` in ``zone``."""

    def instant_from_civil(self, civil: CivilTime, zone: str) -> Instant:
        """Return the instant whose wall-clock reading in ``zone`` is ``civil``."""

    def offset_minutes(self, instant: Instant, zone: str) -> int:
        """Return the signed UTC offset of ``zone`` at ``instant``."""


class PendulumTimeZoneService:
    """
    Time zone conversions backed by pendulum's bundled IANA database.

    ``instant_from_civil`` interprets the civil fields as if they were UTC
    (the trial instant), measures the zone offset at the trial instant and
    corrects by it. Near a transition the offset at the trial instant can be
    the wrong one, so the corrected candidate is re-checked once: a second
    candidate built from the offset at the first one replaces it only if it
    reads back with that same offset. Civil times inside a spring-forward gap
    have no self-consistent candidate and keep the trial-instant resolution.

    The re-check intentionally departs from a single offset correction for
    civil times just after a transition: with one correction, 03:30 on
    2026-03-08 in America/New_York would resolve to 08:30Z (04:30 EDT)
    instead of 07:30Z and would not round-trip.
    """

    def _datetime_at(self, instant: Instant, zone: str) -> DateTime:
        return pendulum.from_timestamp(instant // MS_PER_SECOND, tz=zone)

    def civil_time_at(self, instant: Instant, zone: str) -> CivilTime:
        dt = self._datetime_at(instant, zone)
        return CivilTime(
            year=dt.year,
            month=dt.month,
            day=dt.day,
            hour=dt.hour,
            minute=dt.minute,
            second=dt.second,
        )

    def offset_minutes(self, instant: Instant, zone: str) -> int:
        return self._datetime_at(instant, zone).offset // 60

    def instant_from_civil(self, civil: CivilTime, zone: str) -> Instant:
        trial = pendulum.datetime(
            civil.year,
            civil.month,
            civil.day,
            civil.hour,
            civil.minute,
            civil.second,
            tz="UTC",
        ).int_timestamp * MS_PER_SECOND

        first_offset = self.offset_minutes(trial, zone)
        candidate = trial - first_offset * MS_PER_MINUTE

        second_offset = self.offset_minutes(candidate, zone)
        if second_offset == first_offset:
            return candidate

        refined = trial - second_offset * MS_PER_MINUTE
        if self.offset_minutes(refined, zone) == second_offset:
            return refined

        # Spring-forward gap: keep the offset measured at the trial instant.
        return candidate


_default_service: TimeZoneConversionService = PendulumTimeZoneService()


def get_time_zone_service() -> TimeZoneConversionService:
    """Return the service used by the module-level helpers."""
    return _default_service


def set_time_zone_service(service: TimeZoneConversionService) -> None:
    """Swap the service used by the module-level helpers (tests, embedding)."""
    global _default_service
    _default_service = service


def civil_time_at(instant: Instant, zone: str) -> CivilTime:
    return _default_service.civil_time_at(instant, zone)


def instant_from_civil(civil: CivilTime, zone: str) -> Instant:
    return _default_service.instant_from_civil(civil, zone)


def offset_minutes(instant: Instant, zone: str) -> int:
    return _default_service.offset_minutes(instant, zone)


def iso_weekday(instant: Instant, zone: str) -> int:
    """Weekday of ``instant`` in ``zone``, Monday=1 ... Sunday=7."""
    civil = civil_time_at(instant, zone)
    return pendulum.date(civil.year, civil.month, civil.day).isoweekday()


def sunday_weekday(instant: Instant, zone: str) -> int:
    """Weekday of ``instant`` in ``zone``, Sunday=0 ... Saturday=6."""
    return iso_weekday(instant, zone) % 7


def parse_date(value: str) -> Optional[Date]:
    """Parse a strict ``YYYY-MM-DD`` string; returns None when malformed."""
    if not isinstance(value, str):
        return None
    match = _YMD_PATTERN.match(value)
    if not match:
        return None
    try:
        return pendulum.date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def add_days_to_date(value: str, days: int) -> str:
    """Calendar-date arithmetic on ``YYYY-MM-DD`` strings, unaffected by DST."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return parsed.add(days=days).to_date_string()


def midnight_instant(date: str, zone: str) -> Optional[Instant]:
    """Instant of 00:00 on ``date`` in ``zone``."""
    parsed = parse_date(date)
    if parsed is None:
        return None
    return instant_from_civil(CivilTime(parsed.year, parsed.month, parsed.day), zone)


def parse_instant(value: str) -> Optional[Instant]:
    """
    Parse an ISO-8601 instant string into epoch milliseconds.

    Strings without an offset are read as UTC. Returns None for anything
    that is not a full date-time.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        dt = pendulum.parse(value.strip())
    except (ValueError, TypeError):
        return None

    if not isinstance(dt, DateTime):
        return None

    return dt.int_timestamp * MS_PER_SECOND + dt.microsecond // 1000


def now_instant() -> Instant:
    now = pendulum.now("UTC")
    return now.int_timestamp * MS_PER_SECOND + now.microsecond // 1000
