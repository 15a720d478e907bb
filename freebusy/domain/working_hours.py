"""
Projection of the owner's weekly working hours into the viewer's time zone.

The schedule is authored once, in the owner's zone. The grid is drawn in
the viewer's zone, and the viewer-local reading of an owner-local clock time
depends on the date (DST), so every rule is re-derived per concrete owner
day rather than per weekday in the abstract.
"""

import logging
import math
import re
from typing import Dict, Iterable, List, Optional

from .civil_time import CivilTime, civil_time_at, instant_from_civil, parse_date
from .models import (
    HourBounds,
    Interval,
    MinuteSpan,
    OwnerDay,
    ViewWorkInterval,
    WeeklySchedule,
    WorkingHoursRule,
)

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

_LOCAL_TIME_PATTERN = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")


def parse_local_time(value: str) -> Optional[int]:
    """Parse ``HH:mm`` into minutes since midnight; None when invalid."""
    if not isinstance(value, str):
        return None
    match = _LOCAL_TIME_PATTERN.match(value.strip())
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour * 60 + minute


def _is_iso_weekday(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 7


def schedule_for(rules: Optional[Iterable[WorkingHoursRule]]) -> WeeklySchedule:
    """
    Parse weekly rules into a schedule keyed by ISO weekday.

    Rules with unparsable or inverted times are dropped; the weekday then has
    no working hours. If a weekday appears twice the last rule wins.
    """
    rule_list = list(rules or [])
    spans: Dict[int, MinuteSpan] = {}

    for rule in rule_list:
        if not _is_iso_weekday(rule.iso_weekday):
            logger.warning("Ignoring working hours rule with invalid weekday %r", rule.iso_weekday)
            continue

        start_min = parse_local_time(rule.start_local)
        end_min = parse_local_time(rule.end_local)

        if start_min is None or end_min is None:
            logger.warning(
                "No schedule for weekday %s: cannot parse working hours %r-%r",
                rule.iso_weekday, rule.start_local, rule.end_local,
            )
            continue

        if end_min <= start_min:
            logger.warning(
                "No schedule for weekday %s: working hours %s-%s end before they start",
                rule.iso_weekday, rule.start_local, rule.end_local,
            )
            continue

        spans[rule.iso_weekday] = MinuteSpan(start_min=start_min, end_min=end_min)

    return WeeklySchedule(spans=spans, configured=bool(rule_list))


def _owner_local_instant(owner_date: str, minute_of_day: int, owner_zone: str) -> Optional[int]:
    parsed = parse_date(owner_date)
    if parsed is None:
        return None
    civil = CivilTime(parsed.year, parsed.month, parsed.day, minute_of_day // 60, minute_of_day % 60)
    return instant_from_civil(civil, owner_zone)


def map_rule_to_viewer_interval(
    owner_date: str,
    owner_zone: str,
    viewer_zone: str,
    span: Optional[MinuteSpan],
) -> Optional[ViewWorkInterval]:
    """
    Map one owner-local working span on ``owner_date`` to viewer minutes.

    When the mapped end reads at or before the mapped start, the interval
    crossed viewer midnight and the end is pushed into the next day.
    """
    if span is None:
        return None

    start = _owner_local_instant(owner_date, span.start_min, owner_zone)
    end = _owner_local_instant(owner_date, span.end_min, owner_zone)
    if start is None or end is None:
        return None

    start_min = civil_time_at(start, viewer_zone).minute_of_day
    end_min = civil_time_at(end, viewer_zone).minute_of_day
    if end_min <= start_min:
        end_min += MINUTES_PER_DAY

    return ViewWorkInterval(start_min=start_min, end_min=end_min)


def view_work_intervals(
    owner_days: List[OwnerDay],
    schedule: WeeklySchedule,
    owner_zone: str,
    viewer_zone: str,
    default_start_hour: int,
    default_end_hour: int,
) -> List[Optional[ViewWorkInterval]]:
    """
    Viewer-local working interval for every owner day, index-aligned.

    Without any configured weekly rules each day shows the default hours.
    """
    if not schedule.configured:
        default = ViewWorkInterval(default_start_hour * 60, default_end_hour * 60)
        return [default for _ in owner_days]

    return [
        map_rule_to_viewer_interval(
            day.owner_date,
            owner_zone,
            viewer_zone,
            schedule.for_weekday(day.iso_weekday),
        )
        for day in owner_days
    ]


def bounds_across_week(
    owner_days: List[OwnerDay],
    schedule: WeeklySchedule,
    owner_zone: str,
    viewer_zone: str,
    default_start_hour: int,
    default_end_hour: int,
) -> HourBounds:
    """
    Hour range of the grid: the union of every day's viewer interval,
    floored/ceiled to whole hours, never narrower than the defaults.
    """
    start_hour = default_start_hour
    end_hour = default_end_hour

    intervals = view_work_intervals(
        owner_days, schedule, owner_zone, viewer_zone, default_start_hour, default_end_hour
    )
    for interval in intervals:
        if interval is None:
            continue
        start_hour = min(start_hour, interval.start_min // 60)
        end_hour = max(end_hour, math.ceil(interval.end_min / 60))

    # One grid column is one viewer day.
    start_hour = max(0, start_hour)
    end_hour = min(24, end_hour)

    if end_hour <= start_hour:
        return HourBounds(default_start_hour, default_end_hour)
    return HourBounds(start_hour, end_hour)


def owner_working_interval(
    owner_day: OwnerDay,
    span: Optional[MinuteSpan],
    owner_zone: str,
) -> Optional[Interval]:
    """
    The day's working hours as UTC instants, clipped to the owner day.
    """
    if span is None:
        return None

    start = _owner_local_instant(owner_day.owner_date, span.start_min, owner_zone)
    end = _owner_local_instant(owner_day.owner_date, span.end_min, owner_zone)
    if start is None or end is None or end <= start:
        return None

    return Interval(start, end).intersect(owner_day.as_interval())
