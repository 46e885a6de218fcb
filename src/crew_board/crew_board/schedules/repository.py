from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Schedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: str) -> Optional[Schedule]:
        raise NotImplementedError

    def get_for_employee_and_date(self, *, employee_id: str, work_date: date) -> Optional[Schedule]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, employee_id: Optional[str] = None) -> Sequence[Schedule]:
        """Schedules with start <= work_date <= end, ordered by date then start time."""

        raise NotImplementedError

    def create(self, schedule: Schedule) -> str:
        raise NotImplementedError

    def update(self, schedule: Schedule) -> bool:
        raise NotImplementedError

    def delete(self, schedule_id: str) -> bool:
        raise NotImplementedError
