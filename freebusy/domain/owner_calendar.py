"""
Owner-day enumeration, week padding and week chunking.

Days are walked with calendar-date arithmetic and each day's bounds are the
zone-correct midnights, so DST days come out 23 or 25 hours long.
"""

import logging
from typing import List, Optional

from .civil_time import add_days_to_date, iso_weekday, midnight_instant, parse_date
from .models import OwnerDay

logger = logging.getLogger(__name__)

# Safety valve against malformed windows.
MAX_OWNER_DAYS = 400


def enumerate_owner_days(
    zone: str,
    start_date: str,
    end_date_inclusive: str,
    *,
    in_window: bool = True,
    limit: int = MAX_OWNER_DAYS,
) -> List[OwnerDay]:
    """
    Build one OwnerDay per civil date from ``start_date`` to
    ``end_date_inclusive`` in ``zone``.

    A malformed start date yields no days. Iteration stops after ``limit``
    days; the result is truncated silently rather than raising.
    """
    days: List[OwnerDay] = []

    start = parse_date(start_date)
    if start is None:
        logger.debug("Skipping malformed owner start date %r", start_date)
        return days

    end = parse_date(end_date_inclusive)
    if end is not None and end < start:
        return days

    cursor = start_date
    for _ in range(limit):
        day_start = midnight_instant(cursor, zone)
        next_date = add_days_to_date(cursor, 1)
        day_end = midnight_instant(next_date, zone)
        if day_start is None or day_end is None:
            logger.debug("Skipping malformed owner date %r", cursor)
            return days

        days.append(
            OwnerDay(
                owner_date=cursor,
                iso_weekday=iso_weekday(day_start, zone),
                start=day_start,
                end=day_end,
                in_window=in_window,
            )
        )

        if cursor == end_date_inclusive:
            return days
        cursor = next_date

    logger.debug("Owner day enumeration truncated at %d days", limit)
    return days


def pad_to_week_start(
    owner_days: List[OwnerDay],
    week_start_weekday: int,
    zone: str,
) -> List[OwnerDay]:
    """
    Prepend out-of-window days so the list begins on ``week_start_weekday``.

    The original days are returned unchanged after the padding.
    """
    if not owner_days:
        return list(owner_days)

    first = owner_days[0]
    days_back = (first.iso_weekday + 7 - week_start_weekday) % 7
    if days_back == 0:
        return list(owner_days)

    padding = enumerate_owner_days(
        zone,
        add_days_to_date(first.owner_date, -days_back),
        add_days_to_date(first.owner_date, -1),
        in_window=False,
    )
    return padding + list(owner_days)


def pad_to_week_end(
    owner_days: List[OwnerDay],
    week_start_weekday: int,
    zone: str,
) -> List[OwnerDay]:
    """Append out-of-window days so the last week is complete."""
    if not owner_days:
        return list(owner_days)

    last = owner_days[-1]
    week_end_weekday = (week_start_weekday + 5) % 7 + 1
    days_forward = (week_end_weekday - last.iso_weekday + 7) % 7
    if days_forward == 0:
        return list(owner_days)

    padding = enumerate_owner_days(
        zone,
        add_days_to_date(last.owner_date, 1),
        add_days_to_date(last.owner_date, days_forward),
        in_window=False,
    )
    return list(owner_days) + padding


def chunk_into_weeks(owner_days: List[OwnerDay], week_start_weekday: int) -> List[List[OwnerDay]]:
    """
    Split days into weeks, cutting before every day on ``week_start_weekday``.

    No days are fabricated: without trailing padding the last week may be
    shorter than seven days.
    """
    weeks: List[List[OwnerDay]] = []
    current: List[OwnerDay] = []

    for day in owner_days:
        if current and day.iso_weekday == week_start_weekday:
            weeks.append(current)
            current = []
        current.append(day)

    if current:
        weeks.append(current)
    return weeks


def build_owner_weeks(
    zone: str,
    start_date: str,
    end_date_inclusive: str,
    week_start_weekday: Optional[int] = None,
) -> List[List[OwnerDay]]:
    """Enumerate the window, pad it to whole weeks and chunk it."""
    days = enumerate_owner_days(zone, start_date, end_date_inclusive)
    if not week_start_weekday or not days:
        return [days] if days else []

    padded = pad_to_week_start(days, week_start_weekday, zone)
    padded = pad_to_week_end(padded, week_start_weekday, zone)
    return chunk_into_weeks(padded, week_start_weekday)

