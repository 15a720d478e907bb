"""
Grid-cell availability and busy-block geometry for one owner-day column.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from .civil_time import Instant, civil_time_at
from .models import BusyInterval, OwnerDay, ViewWorkInterval

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class NoCell:
    """Cell is entirely unavailable."""


@dataclass(frozen=True)
class FullCell:
    """Cell is entirely inside the working interval."""


@dataclass(frozen=True)
class PartialCell:
    """Available slice of a cell, as percentages of its 60 minutes."""
    top_pct: float
    height_pct: float


CellAvailability = Union[NoCell, FullCell, PartialCell]


@dataclass(frozen=True)
class VisibleBusyInterval:
    """
    A busy interval placed on one day column.

    ``visible_start``/``visible_end`` are the UTC bounds after clipping to the
    owner day; ``top``/``height`` are pixels after clipping to the grid hours.
    """
    busy: BusyInterval
    visible_start: Instant
    visible_end: Instant
    top: float
    height: float


def hour_slots(start_hour: int, end_hour: int) -> List[int]:
    return list(range(start_hour, end_hour))


def classify_hour_cell(
    in_window: bool,
    interval: Optional[ViewWorkInterval],
    hour: int,
) -> CellAvailability:
    """Classify the cell ``[hour:00, hour+1:00)`` against a viewer interval."""
    if not in_window or interval is None:
        return NoCell()

    cell_start = hour * 60
    cell_end = cell_start + 60

    overlap_start = max(cell_start, interval.start_min)
    overlap_end = min(cell_end, interval.end_min)
    if overlap_end <= overlap_start:
        return NoCell()

    if interval.start_min <= cell_start and interval.end_min >= cell_end:
        return FullCell()

    return PartialCell(
        top_pct=(overlap_start - cell_start) * 100 / 60,
        height_pct=(overlap_end - overlap_start) * 100 / 60,
    )


def _viewer_minute_of_day(instant: Instant, viewer_zone: str) -> float:
    civil = civil_time_at(instant, viewer_zone)
    return civil.minute_of_day + civil.second / 60


def render_busy_intervals_for_day(
    owner_day: OwnerDay,
    busy: List[BusyInterval],
    viewer_zone: str,
    work_start_hour: int,
    work_end_hour: int,
    cell_height: float,
) -> List[VisibleBusyInterval]:
    """
    Place busy intervals on an owner-day column.

    Intervals are first clipped to the owner day in UTC (which day a moment
    belongs to is an owner-zone question), then converted to viewer minutes
    and clipped to the grid hours (where it falls on the clock is a
    viewer-zone question).
    """
    view_start_min = work_start_hour * 60
    view_end_min = work_end_hour * 60
    px_per_minute = cell_height / 60

    rendered: List[VisibleBusyInterval] = []

    for interval in busy:
        if not owner_day.intersects(interval.start, interval.end):
            continue

        if interval.is_all_day:
            rendered.append(
                VisibleBusyInterval(
                    busy=interval,
                    visible_start=owner_day.start,
                    visible_end=owner_day.end,
                    top=0,
                    height=(view_end_min - view_start_min) * px_per_minute,
                )
            )
            continue

        clipped_start = max(interval.start, owner_day.start)
        clipped_end = min(interval.end, owner_day.end)
        if clipped_end <= clipped_start:
            continue

        start_min = _viewer_minute_of_day(clipped_start, viewer_zone)
        end_min = _viewer_minute_of_day(clipped_end, viewer_zone)
        if end_min <= start_min:
            end_min += MINUTES_PER_DAY

        visible_start_min = max(start_min, view_start_min)
        visible_end_min = min(end_min, view_end_min)
        if visible_end_min <= visible_start_min:
            continue

        rendered.append(
            VisibleBusyInterval(
                busy=interval,
                visible_start=clipped_start,
                visible_end=clipped_end,
                top=(visible_start_min - view_start_min) * px_per_minute,
                height=(visible_end_min - visible_start_min) * px_per_minute,
            )
        )

    return rendered


def busy_minutes_in_cell(blocks: List[VisibleBusyInterval], hour: int, work_start_hour: int, cell_height: float) -> float:
    """Minutes of the cell at ``hour`` covered by rendered busy blocks."""
    if cell_height <= 0:
        return 0.0

    minutes_per_px = 60 / cell_height
    cell_start = (hour - work_start_hour) * 60
    cell_end = cell_start + 60

    covered = 0.0
    for block in blocks:
        block_start = block.top * minutes_per_px
        block_end = block_start + block.height * minutes_per_px
        overlap = min(cell_end, block_end) - max(cell_start, block_start)
        if overlap > 0:
            covered += overlap
    return min(covered, 60.0)

