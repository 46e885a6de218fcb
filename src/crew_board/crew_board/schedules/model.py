from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import ScheduleType


@dataclass(frozen=True)
class Schedule:
    """A planned shift for one employee on one date."""

    schedule_id: str
    employee_id: str
    work_date: date
    start_time: time
    end_time: time
    schedule_type: ScheduleType = ScheduleType.FIXED

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.work_date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.work_date, self.end_time)


@dataclass(frozen=True)
class SchedulePatch:
    work_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    schedule_type: Optional[ScheduleType] = None

    def apply(self, schedule: Schedule) -> Schedule:
        changes = {k: v for k, v in self.__dict__.items() if v is not None}
        return replace(schedule, **changes)
