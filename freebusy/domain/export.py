"""
Plain-text availability export.

For each owner day the working interval is rounded inward to half hours,
busy intervals are rounded outward, and what remains after subtraction is
reported in the viewer's time zone. The asymmetry is deliberate: a partly
busy half hour counts as busy, a partly worked half hour does not count as
available.
"""

from dataclasses import dataclass
from typing import List, Optional

from .civil_time import (
    MS_PER_SECOND,
    CivilTime,
    Instant,
    add_days_to_date,
    civil_time_at,
    instant_from_civil,
    midnight_instant,
    now_instant,
)
from .formatting import (
    format_date,
    format_date_header,
    format_instant_iso,
    format_time_range,
    time_zone_abbreviation,
)
from .intervals import subtract_intervals
from .models import AvailabilityRange, BusyInterval, Interval, OwnerDay, WeeklySchedule
from .working_hours import owner_working_interval

NO_AVAILABILITY = "No availability"
HALF_HOUR = 30
MINUTES_PER_DAY = 24 * 60

FALLBACK_START_HOUR = 8
FALLBACK_END_HOUR = 18


@dataclass(frozen=True)
class DateWindow:
    """Owner-local date bounds of the requested window."""
    start_date: str
    end_date_inclusive: str


def _rebuild(civil: CivilTime, rounded_minutes: int, zone: str) -> Instant:
    day_offset = rounded_minutes // MINUTES_PER_DAY
    minutes = rounded_minutes % MINUTES_PER_DAY
    date = add_days_to_date(civil.date_string(), day_offset)
    year, month, day = (int(part) for part in date.split("-"))
    return instant_from_civil(CivilTime(year, month, day, minutes // 60, minutes % 60), zone)


def floor_to_half_hour(instant: Instant, zone: str) -> Instant:
    """Latest :00/:30 wall-clock boundary in ``zone`` at or before ``instant``."""
    civil = civil_time_at(instant, zone)
    rounded = (civil.minute_of_day // HALF_HOUR) * HALF_HOUR
    return _rebuild(civil, rounded, zone)


def ceil_to_half_hour(instant: Instant, zone: str) -> Instant:
    """Earliest :00/:30 wall-clock boundary in ``zone`` at or after ``instant``."""
    civil = civil_time_at(instant, zone)
    total = civil.minute_of_day
    # Any seconds left over push the instant past the minute boundary.
    if civil.second > 0 or instant % MS_PER_SECOND:
        total += 1
    rounded = -(-total // HALF_HOUR) * HALF_HOUR
    return _rebuild(civil, rounded, zone)


class AvailabilityExporter:
    """
    Computes confidently-available ranges per owner day and renders them.

    Algorithm per day:
    1. Resolve the day's working interval in UTC from the owner-local rule
    2. Round it inward to half hours in the viewer zone
    3. Clip busy intervals to the owner day and round them outward
       (all-day busy blocks the whole rounded working interval)
    4. Merge the busy ranges and subtract them from the working interval
    """

    def __init__(
        self,
        schedule: WeeklySchedule,
        owner_zone: str,
        viewer_zone: str,
        fallback_start_hour: int = FALLBACK_START_HOUR,
        fallback_end_hour: int = FALLBACK_END_HOUR,
    ):
        self.schedule = schedule
        self.owner_zone = owner_zone
        self.viewer_zone = viewer_zone
        self.fallback_start_hour = fallback_start_hour
        self.fallback_end_hour = fallback_end_hour

    def working_interval(self, owner_day: OwnerDay) -> Optional[Interval]:
        """Unrounded UTC working interval of the day, or None."""
        if self.schedule.configured:
            return owner_working_interval(
                owner_day,
                self.schedule.for_weekday(owner_day.iso_weekday),
                self.owner_zone,
            )

        # No weekly rules at all: default hours on the viewer-local date the
        # owner day starts on.
        civil = civil_time_at(owner_day.start, self.viewer_zone)
        start = instant_from_civil(
            CivilTime(civil.year, civil.month, civil.day, self.fallback_start_hour), self.viewer_zone
        )
        end = instant_from_civil(
            CivilTime(civil.year, civil.month, civil.day, self.fallback_end_hour), self.viewer_zone
        )
        if end <= start:
            return None
        return Interval(start, end)

    def rounded_working_interval(self, owner_day: OwnerDay) -> Optional[Interval]:
        working = self.working_interval(owner_day)
        if working is None:
            return None

        start = ceil_to_half_hour(working.start, self.viewer_zone)
        end = floor_to_half_hour(working.end, self.viewer_zone)
        if end <= start:
            return None
        return Interval(start, end)

    def busy_blocks(self, owner_day: OwnerDay, working: Interval, busy: List[BusyInterval]) -> List[Interval]:
        """Busy ranges of the day, rounded outward and limited to ``working``."""
        blocks: List[Interval] = []

        for interval in busy:
            clipped = interval.as_interval().intersect(owner_day.as_interval())
            if clipped is None:
                continue

            if interval.is_all_day:
                rounded = working
            else:
                start = floor_to_half_hour(clipped.start, self.viewer_zone)
                end = ceil_to_half_hour(clipped.end, self.viewer_zone)
                if end <= start:
                    continue
                rounded = Interval(start, end)

            within_work = rounded.intersect(working)
            if within_work is not None:
                blocks.append(within_work)

        return blocks

    def available_ranges(self, owner_day: OwnerDay, busy: List[BusyInterval]) -> List[AvailabilityRange]:
        working = self.rounded_working_interval(owner_day)
        if working is None:
            return []
        return subtract_intervals(working, self.busy_blocks(owner_day, working, busy))

    def format_day(self, owner_day: OwnerDay, busy: List[BusyInterval]) -> str:
        label = format_date_header(owner_day.start, self.owner_zone)
        available = self.available_ranges(owner_day, busy)
        if not available:
            return f"{label}: {NO_AVAILABILITY}"

        ranges = "; ".join(
            format_time_range(r.start, r.end, self.viewer_zone) for r in available
        )
        return f"{label}: {ranges}"

    def _date_range_label(self, window: Optional[DateWindow]) -> Optional[str]:
        if window is None:
            return None

        start = midnight_instant(window.start_date, self.owner_zone)
        end = midnight_instant(window.end_date_inclusive, self.owner_zone)
        if start is None or end is None:
            return None

        return f"{format_date(start, self.owner_zone)} to {format_date(end, self.owner_zone)}"

    def build_text(
        self,
        owner_days: List[OwnerDay],
        busy: List[BusyInterval],
        window: Optional[DateWindow] = None,
        generated_at: Optional[Instant] = None,
    ) -> str:
        """
        Render the export. Days padded in purely for display are skipped.
        """
        days = [day for day in owner_days if day.in_window]

        if generated_at is not None:
            reference = generated_at
        elif days:
            reference = days[0].start
        else:
            reference = now_instant()
        abbreviation = time_zone_abbreviation(reference, self.viewer_zone)

        date_range = self._date_range_label(window)
        header = f"Availability ({abbreviation})"
        if date_range:
            header = f"{header} - {date_range}"

        lines = [
            header,
            f"Times shown in {abbreviation} ({self.viewer_zone}).",
            "",
        ]

        if generated_at is not None:
            lines.append(f"Generated: {format_instant_iso(generated_at)}")
            lines.append("")

        for day in days:
            lines.append(self.format_day(day, busy))

        return "\n".join(lines)


def export_filename(
    window: Optional[DateWindow],
    owner_days: List[OwnerDay],
    viewer_zone: str,
) -> str:
    """Suggested download name, e.g. availability-2025-12-29-to-2026-01-04-America-New_York.txt."""
    start = window.start_date if window else (owner_days[0].owner_date if owner_days else None)
    end = window.end_date_inclusive if window else (owner_days[-1].owner_date if owner_days else None)

    zone_safe = viewer_zone.replace("/", "-")
    if not (start and end):
        return f"availability-{zone_safe}.txt"
    return f"availability-{start}-to-{end}-{zone_safe}.txt"
