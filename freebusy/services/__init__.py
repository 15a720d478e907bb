"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .calendar_view import CalendarView, CalendarViewService, CalendarWeek, ExportResult
from .snapshot_cache import SnapshotCache, SnapshotSourceProtocol, SnapshotState

__all__ = [
    "CalendarView",
    "CalendarViewService",
    "CalendarWeek",
    "ExportResult",
    "SnapshotCache",
    "SnapshotSourceProtocol",
    "SnapshotState",
]
