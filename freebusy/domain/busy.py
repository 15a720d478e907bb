"""
Normalization of raw busy intervals into canonical UTC instant pairs.
"""

import logging
from typing import Any, Iterable, List, Protocol

from .civil_time import parse_instant
from .models import BusyInterval, BusyKind

logger = logging.getLogger(__name__)


class RawBusyInterval(Protocol):
    """Shape of a busy entry as delivered by the feed; fields may hold anything."""
    start_utc: Any
    end_utc: Any
    kind: Any


def parse_busy_kind(value: str) -> BusyKind | None:
    if not isinstance(value, str):
        return None
    try:
        return BusyKind(value)
    except ValueError:
        return None


def normalize(raw: Iterable[RawBusyInterval]) -> List[BusyInterval]:
    """
    Parse raw busy entries, dropping malformed and non-positive ones.

    Order is preserved and nothing is merged: clipping happens per owner day
    downstream, where the same interval is clipped differently for the grid
    and for the export.
    """
    parsed: List[BusyInterval] = []

    for entry in raw:
        start = parse_instant(entry.start_utc)
        end = parse_instant(entry.end_utc)
        if start is None or end is None:
            logger.debug("Dropping busy interval with unparsable bounds: %r - %r", entry.start_utc, entry.end_utc)
            continue
        if end <= start:
            logger.debug("Dropping busy interval with non-positive duration: %s - %s", entry.start_utc, entry.end_utc)
            continue

        kind = parse_busy_kind(entry.kind)
        if kind is None:
            logger.warning("Dropping busy interval with unknown kind %r", entry.kind)
            continue

        parsed.append(BusyInterval(start=start, end=end, kind=kind))

    return parsed
