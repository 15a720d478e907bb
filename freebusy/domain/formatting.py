"""
Human-readable labels for instants, rendered in a given time zone.
"""

import pendulum

from .civil_time import MS_PER_SECOND, Instant, civil_time_at

# Labels are always English; the calendar is not localized.
LOCALE = "en"


def _in_zone(instant: Instant, zone: str):
    return pendulum.from_timestamp(instant // MS_PER_SECOND, tz=zone)


def format_hour(hour: int) -> str:
    """Grid row label: 0 -> '12 AM', 13 -> '1 PM'."""
    return format_clock(hour % 24, 0)


def format_clock(hour: int, minute: int) -> str:
    """12-hour clock label, minutes omitted on the hour ('9 AM', '4:30 PM')."""
    suffix = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    if minute == 0:
        return f"{display_hour} {suffix}"
    return f"{display_hour}:{minute:02d} {suffix}"


def format_time(instant: Instant, zone: str) -> str:
    civil = civil_time_at(instant, zone)
    return format_clock(civil.hour, civil.minute)


def format_time_range(start: Instant, end: Instant, zone: str) -> str:
    return f"{format_time(start, zone)} - {format_time(end, zone)}"


def format_date_header(instant: Instant, zone: str) -> str:
    """Column header / export day label, e.g. 'Mon, Dec 29'."""
    return _in_zone(instant, zone).format("ddd, MMM D", locale=LOCALE)


def format_date(instant: Instant, zone: str) -> str:
    """Long date label, e.g. 'Dec 29, 2025'."""
    return _in_zone(instant, zone).format("MMM D, YYYY", locale=LOCALE)


def format_instant_iso(instant: Instant) -> str:
    """Machine-readable UTC timestamp: 2025-12-29T12:34:56.000Z."""
    base = _in_zone(instant, "UTC").format("YYYY-MM-DD[T]HH:mm:ss")
    return f"{base}.{instant % MS_PER_SECOND:03d}Z"


def time_zone_abbreviation(instant: Instant, zone: str) -> str:
    """Short display name of ``zone`` at ``instant`` ('EST', 'PDT'), or the id."""
    name = _in_zone(instant, zone).tzname()
    return name or zone
