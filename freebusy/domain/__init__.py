"""
Domain layer - time zone arithmetic and interval logic, no I/O.
"""

from .busy import normalize
from .civil_time import CivilTime, PendulumTimeZoneService, TimeZoneConversionService
from .export import AvailabilityExporter, DateWindow, export_filename
from .grid import CellAvailability, FullCell, NoCell, PartialCell, VisibleBusyInterval
from .models import (
    BusyInterval,
    BusyKind,
    HourBounds,
    Interval,
    OwnerDay,
    ViewWorkInterval,
    WeeklySchedule,
    WorkingHoursRule,
)

__all__ = [
    "AvailabilityExporter",
    "BusyInterval",
    "BusyKind",
    "CellAvailability",
    "CivilTime",
    "DateWindow",
    "FullCell",
    "HourBounds",
    "Interval",
    "NoCell",
    "OwnerDay",
    "PartialCell",
    "PendulumTimeZoneService",
    "TimeZoneConversionService",
    "ViewWorkInterval",
    "VisibleBusyInterval",
    "WeeklySchedule",
    "WorkingHoursRule",
    "export_filename",
    "normalize",
]
