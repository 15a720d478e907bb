"""
Pydantic models for the free/busy snapshot served by the availability API.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .domain.exceptions import SnapshotError
from .domain.export import DateWindow
from .domain.models import WorkingHoursRule


class _Dto(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CalendarContextDto(_Dto):
    time_zone: str = Field(alias="timeZone")
    week_start_day: Optional[int] = Field(default=None, alias="weekStartDay")  # 1=Mon ... 7=Sun

    @field_validator("week_start_day")
    @classmethod
    def validate_week_start_day(cls, value: Optional[int]) -> Optional[int]:
        """Ensure the week start is an ISO weekday."""
        if value is not None and not 1 <= value <= 7:
            raise ValueError(f"weekStartDay must be between 1 and 7, got {value}")
        return value


class WindowDto(_Dto):
    # Owner-local dates
    start_date: str = Field(alias="startDate")
    end_date_inclusive: str = Field(alias="endDateInclusive")
    # UTC instants
    start_utc: Optional[str] = Field(default=None, alias="startUtc")
    end_utc_exclusive: Optional[str] = Field(default=None, alias="endUtcExclusive")

    def to_date_window(self) -> DateWindow:
        return DateWindow(start_date=self.start_date, end_date_inclusive=self.end_date_inclusive)


class WorkingHoursRuleDto(_Dto):
    # Kept raw: a malformed rule is dropped by schedule_for, not rejected here.
    day_of_week: Any = Field(default=None, alias="dayOfWeek")  # 1=Mon ... 7=Sun
    start: Any = None  # HH:mm, owner-local
    end: Any = None

    def to_rule(self) -> WorkingHoursRule:
        return WorkingHoursRule(iso_weekday=self.day_of_week, start_local=self.start, end_local=self.end)


class WorkingHoursDto(_Dto):
    weekly: List[WorkingHoursRuleDto] = Field(default_factory=list)

    def rules(self) -> List[WorkingHoursRule]:
        return [rule.to_rule() for rule in self.weekly]


class BusyIntervalDto(_Dto):
    # Kept raw: a malformed entry is dropped by normalize, not rejected here.
    start_utc: Any = Field(default=None, alias="startUtc")
    end_utc: Any = Field(default=None, alias="endUtc")
    kind: Any = "time"


class FreeBusySnapshot(_Dto):
    """One complete server snapshot; a refresh replaces it wholesale."""
    version: Optional[str] = None
    generated_at_utc: Optional[str] = Field(default=None, alias="generatedAtUtc")
    calendar: CalendarContextDto
    window: WindowDto
    working_hours: Optional[WorkingHoursDto] = Field(default=None, alias="workingHours")
    busy: List[BusyIntervalDto] = Field(default_factory=list)

    @property
    def owner_time_zone(self) -> str:
        return self.calendar.time_zone

    @property
    def week_start_day(self) -> Optional[int]:
        return self.calendar.week_start_day

    def working_hours_rules(self) -> List[WorkingHoursRule]:
        return self.working_hours.rules() if self.working_hours else []

    @classmethod
    def from_payload(cls, payload: Any) -> "FreeBusySnapshot":
        """
        Validate a decoded JSON payload.

        Raises:
            SnapshotError: If the payload is not a valid snapshot
        """
        if not isinstance(payload, dict):
            raise SnapshotError("Snapshot payload must be a JSON object.")

        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise SnapshotError(f"Invalid free/busy snapshot: {exc}") from exc

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
