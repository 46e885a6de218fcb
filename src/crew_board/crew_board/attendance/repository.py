from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, *, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def latest_for_employee(self, employee_id: str) -> Optional[AttendanceRecord]:
        """Most recent record by clock-in time."""

        raise NotImplementedError

    def list_range(self, *, start: date, end: date, employee_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> str:
        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError
