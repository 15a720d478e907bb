"""
Domain models for owner days, busy intervals and working-hour spans.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from .civil_time import MS_PER_HOUR, MS_PER_MINUTE, Instant


@dataclass(frozen=True)
class Interval:
    """
    Immutable half-open instant range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: Instant
    end: Instant

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start instant {self.start} must be before end instant {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes."""
        return (self.end - self.start) // MS_PER_MINUTE

    def overlaps(self, other: "Interval") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def intersect(self, other: "Interval") -> "Interval | None":
        """
        Calculate the intersection of two ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        return Interval(start=max(self.start, other.start), end=min(self.end, other.end))


# A confidently-available slice of a working day, produced by the exporter.
AvailabilityRange = Interval


class BusyKind(str, Enum):
    """How a busy interval blocks the owner's day."""
    TIMED = "time"
    ALL_DAY = "allDay"


@dataclass(frozen=True)
class BusyInterval:
    """
    A canonical busy interval.

    ``ALL_DAY`` is a marker: wherever it matters the interval is resolved to
    the bounds of the owner day it touches, not to its literal instants.
    """
    start: Instant
    end: Instant
    kind: BusyKind = BusyKind.TIMED

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Busy interval must end after it starts ({self.start} >= {self.end})")

    @property
    def is_all_day(self) -> bool:
        return self.kind is BusyKind.ALL_DAY

    def as_interval(self) -> Interval:
        return Interval(self.start, self.end)


@dataclass(frozen=True)
class OwnerDay:
    """One midnight-to-midnight civil day in the owner's time zone."""
    owner_date: str  # YYYY-MM-DD
    iso_weekday: int  # 1=Monday, 7=Sunday
    start: Instant
    end: Instant
    in_window: bool = True

    @property
    def length_hours(self) -> float:
        return (self.end - self.start) / MS_PER_HOUR

    def as_interval(self) -> Interval:
        return Interval(self.start, self.end)

    def intersects(self, start: Instant, end: Instant) -> bool:
        """Half-open overlap test against ``[start, end)``."""
        return start < self.end and end > self.start


@dataclass(frozen=True)
class WorkingHoursRule:
    """Owner-local working hours for one ISO weekday, as authored (HH:mm)."""
    iso_weekday: int
    start_local: str
    end_local: str


@dataclass(frozen=True)
class MinuteSpan:
    """Owner-local working hours of one weekday, in minutes since midnight."""
    start_min: int
    end_min: int


@dataclass(frozen=True)
class WeeklySchedule:
    """
    Parsed weekly working hours keyed by ISO weekday.

    ``configured`` is False when the snapshot carried no weekly rules at all;
    callers then fall back to default hours instead of "no availability".
    """
    spans: Mapping[int, MinuteSpan] = field(default_factory=dict)
    configured: bool = True

    def for_weekday(self, iso_weekday: int) -> Optional[MinuteSpan]:
        return self.spans.get(iso_weekday)

    def has_weekday(self, iso_weekday: int) -> bool:
        return iso_weekday in self.spans

    def __len__(self) -> int:
        return len(self.spans)


@dataclass(frozen=True)
class ViewWorkInterval:
    """
    Working hours of one owner day in viewer-local minutes since midnight.

    ``end_min`` may exceed 1440 when the interval crosses viewer midnight.
    """
    start_min: int
    end_min: int


@dataclass(frozen=True)
class HourBounds:
    """Hour range ``[start_hour, end_hour)`` of the rendered grid."""
    start_hour: int
    end_hour: int

