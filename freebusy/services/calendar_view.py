"""
Application service that turns a free/busy snapshot into renderable state.

The service owns no state: every call rebuilds the owner days, the parsed
schedule, the grid geometry and the export text from the snapshot it is
handed, so a refreshed snapshot can never be mixed with derived values of
an older one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..domain.busy import normalize
from ..domain.civil_time import Instant, parse_instant
from ..domain.export import AvailabilityExporter, DateWindow, export_filename
from ..domain.grid import (
    CellAvailability,
    VisibleBusyInterval,
    classify_hour_cell,
    hour_slots,
    render_busy_intervals_for_day,
)
from ..domain.models import BusyInterval, HourBounds, OwnerDay, ViewWorkInterval, WeeklySchedule
from ..domain.owner_calendar import build_owner_weeks
from ..domain.working_hours import bounds_across_week, schedule_for, view_work_intervals
from ..schemas import FreeBusySnapshot


@dataclass(frozen=True)
class ExportResult:
    text: str
    filename: str


@dataclass
class CalendarWeek:
    """One rendered week: its days, hour bounds and per-day geometry."""
    days: List[OwnerDay]
    bounds: HourBounds
    intervals: List[Optional[ViewWorkInterval]]
    busy_by_day: List[List[VisibleBusyInterval]] = field(default_factory=list)

    def hours(self) -> List[int]:
        return hour_slots(self.bounds.start_hour, self.bounds.end_hour)

    def cell(self, day_index: int, hour: int) -> CellAvailability:
        day = self.days[day_index]
        return classify_hour_cell(day.in_window, self.intervals[day_index], hour)

    def busy_blocks(self, day_index: int) -> List[VisibleBusyInterval]:
        return self.busy_by_day[day_index]


@dataclass
class CalendarView:
    owner_zone: str
    viewer_zone: str
    window: DateWindow
    schedule: WeeklySchedule
    busy: List[BusyInterval]
    weeks: List[CalendarWeek]

    @property
    def owner_days(self) -> List[OwnerDay]:
        return [day for week in self.weeks for day in week.days]

    def is_empty(self) -> bool:
        return not self.weeks


class CalendarViewService:
    """
    Builds the calendar grid and the availability export from a snapshot.

    Args:
        default_start_hour: First grid hour when no working hours widen it
        default_end_hour: Last grid hour (exclusive) when no working hours widen it
        cell_height: Pixel height of one hour cell, used for busy geometry
    """

    def __init__(
        self,
        default_start_hour: int = 8,
        default_end_hour: int = 18,
        cell_height: float = 48,
    ) -> None:
        self._default_start_hour = default_start_hour
        self._default_end_hour = default_end_hour
        self._cell_height = cell_height

    def build_view(self, snapshot: FreeBusySnapshot, viewer_zone: str) -> CalendarView:
        owner_zone = snapshot.owner_time_zone
        window = snapshot.window.to_date_window()
        schedule = schedule_for(snapshot.working_hours_rules())
        busy = normalize(snapshot.busy)

        weeks = [
            self._build_week(days, schedule, busy, owner_zone, viewer_zone)
            for days in build_owner_weeks(
                owner_zone,
                window.start_date,
                window.end_date_inclusive,
                snapshot.week_start_day,
            )
        ]

        return CalendarView(
            owner_zone=owner_zone,
            viewer_zone=viewer_zone,
            window=window,
            schedule=schedule,
            busy=busy,
            weeks=weeks,
        )

    def build_export(
        self,
        snapshot: FreeBusySnapshot,
        viewer_zone: str,
        generated_at: Optional[Instant] = None,
    ) -> ExportResult:
        """
        Render the plain-text availability export for ``viewer_zone``.

        ``generated_at`` is stamped into the header when given.
        """
        view = self.build_view(snapshot, viewer_zone)
        exporter = AvailabilityExporter(
            schedule=view.schedule,
            owner_zone=view.owner_zone,
            viewer_zone=viewer_zone,
        )
        owner_days = view.owner_days

        text = exporter.build_text(
            owner_days,
            view.busy,
            window=view.window,
            generated_at=generated_at,
        )
        in_window = [day for day in owner_days if day.in_window]
        return ExportResult(text=text, filename=export_filename(view.window, in_window, viewer_zone))

    @staticmethod
    def snapshot_generated_at(snapshot: FreeBusySnapshot) -> Optional[Instant]:
        return parse_instant(snapshot.generated_at_utc)

    def _build_week(
        self,
        days: List[OwnerDay],
        schedule: WeeklySchedule,
        busy: List[BusyInterval],
        owner_zone: str,
        viewer_zone: str,
    ) -> CalendarWeek:
        bounds = bounds_across_week(
            days, schedule, owner_zone, viewer_zone,
            self._default_start_hour, self._default_end_hour,
        )
        intervals = view_work_intervals(
            days, schedule, owner_zone, viewer_zone,
            self._default_start_hour, self._default_end_hour,
        )
        busy_by_day = [
            render_busy_intervals_for_day(
                day, busy, viewer_zone,
                bounds.start_hour, bounds.end_hour, self._cell_height,
            )
            for day in days
        ]
        return CalendarWeek(days=days, bounds=bounds, intervals=intervals, busy_by_day=busy_by_day)
