"""
Interval algebra over half-open instant ranges.
"""

from typing import Iterable, List, Optional

from .models import Interval


def intersect(a: Interval, b: Interval) -> Optional[Interval]:
    """Overlap of two ranges, or None when they only touch or are disjoint."""
    return a.intersect(b)


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Merge overlapping or adjacent ranges.

    Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
    """
    sorted_ranges = sorted(intervals, key=lambda r: r.start)
    if not sorted_ranges:
        return []

    merged: List[Interval] = [sorted_ranges[0]]

    for current in sorted_ranges[1:]:
        last = merged[-1]

        # Overlapping or adjacent (no gap)
        if current.start <= last.end:
            merged[-1] = Interval(start=last.start, end=max(last.end, current.end))
        else:
            merged.append(current)

    return merged


def subtract_intervals(base: Interval, blocks: Iterable[Interval]) -> List[Interval]:
    """
    Subtract ``blocks`` from ``base``, yielding the uncovered ranges.

    Example:
    Base: 09:00 - 17:00
    Blocks: [10:00-11:00, 14:00-15:00]
    Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
    """
    free_ranges: List[Interval] = []
    cursor = base.start

    for block in merge_intervals(blocks):
        if block.end <= cursor:
            continue

        if block.start > cursor:
            gap_end = min(block.start, base.end)
            if gap_end > cursor:
                free_ranges.append(Interval(start=cursor, end=gap_end))

        cursor = max(cursor, block.end)
        if cursor >= base.end:
            break

    if cursor < base.end:
        free_ranges.append(Interval(start=cursor, end=base.end))

    return free_ranges


def total_minutes(intervals: Iterable[Interval]) -> int:
    return sum(interval.duration_minutes() for interval in intervals)
