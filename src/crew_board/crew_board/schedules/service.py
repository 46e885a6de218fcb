from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_days, normalize_month, parse_month
from ..common.ids import new_id
from ..common.mutations import reversible
from ..core.constants import NEXT_SCHEDULE_LOOKBACK_MINUTES
from ..core.enums import BranchCode, ScheduleType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..database.mysql_base import month_bounds
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import SessionUser
from .model import Schedule, SchedulePatch
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

_NEXT_SCHEDULE_HORIZON_DAYS = 366


def _check_times(start_time: Optional[time], end_time: Optional[time]) -> None:
    if start_time is None or end_time is None:
        raise ValidationError("Start and end time are required")
    if start_time >= end_time:
        raise ValidationError("Start time must be before end time")


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
    ):
        self._schedules = schedules
        self._employees = employees
        self._attendance = attendance

    def _managed_employee(self, actor: SessionUser, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not actor.can_manage_branch(employee.branch):
            raise AuthorizationError("You cannot manage schedules for this branch")
        return employee

    def _get(self, schedule_id: str) -> Schedule:
        schedule = self._schedules.get_by_id(schedule_id)
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def add_schedule(
        self,
        *,
        actor: SessionUser,
        employee_id: str,
        work_date: date,
        start_time: time,
        end_time: time,
        schedule_type: ScheduleType = ScheduleType.FIXED,
    ) -> Schedule:
        self._managed_employee(actor, employee_id)
        _check_times(start_time, end_time)

        schedule = Schedule(
            schedule_id=new_id("sch"),
            employee_id=employee_id,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            schedule_type=schedule_type,
        )
        self._schedules.create(schedule)
        return schedule

    def add_recurring(
        self,
        *,
        actor: SessionUser,
        employee_id: str,
        month: str,
        weekdays: Iterable[int],
        start_time: time,
        end_time: time,
    ) -> Sequence[Schedule]:
        """Create a FIXED schedule on every matching weekday (Monday=0) of the month."""

        self._managed_employee(actor, employee_id)
        _check_times(start_time, end_time)

        wanted = set(int(w) for w in weekdays)
        if not wanted:
            raise ValidationError("Pick at least one weekday")
        if any(w < 0 or w > 6 for w in wanted):
            raise ValidationError("Weekdays must be between 0 (Monday) and 6 (Sunday)")

        year, mon = parse_month(month)
        created: list[Schedule] = []
        for day in month_days(year, mon):
            if day.weekday() not in wanted:
                continue
            schedule = Schedule(
                schedule_id=new_id("sch"),
                employee_id=employee_id,
                work_date=day,
                start_time=start_time,
                end_time=end_time,
                schedule_type=ScheduleType.FIXED,
            )
            self._schedules.create(schedule)
            created.append(schedule)

        logger.info("created %d recurring schedules for %s in %s", len(created), employee_id, month)
        return created

    def update_schedule(self, *, actor: SessionUser, schedule_id: str, patch: SchedulePatch) -> Schedule:
        current = self._get(schedule_id)
        self._managed_employee(actor, current.employee_id)

        updated = patch.apply(current)
        _check_times(updated.start_time, updated.end_time)
        if not self._schedules.update(updated):
            raise ValidationError("Updating schedule failed")
        return updated

    def delete_schedule(self, *, actor: SessionUser, schedule_id: str) -> None:
        """Delete a schedule and the attendance record of the same employee and date."""

        schedule = self._get(schedule_id)
        self._managed_employee(actor, schedule.employee_id)
        linked = self._attendance.get_for_employee_and_date(
            employee_id=schedule.employee_id, work_date=schedule.work_date
        )

        with reversible(f"delete schedule {schedule_id}") as log:
            log.apply(
                "schedule delete",
                lambda: self._schedules.delete(schedule_id),
                lambda: self._schedules.create(schedule),
            )
            if linked:
                log.apply(
                    "linked attendance delete",
                    lambda: self._attendance.delete(linked.record_id),
                    lambda: self._attendance.create(linked),
                )

    def list_month(self, *, month: str, branch: Optional[BranchCode] = None) -> Sequence[Schedule]:
        month = normalize_month(month)
        start, end = month_bounds(month)
        rows = self._schedules.list_range(start=start, end=end)
        if branch is None:
            return list(rows)

        in_branch = {e.employee_id for e in self._employees.list_all() if e.branch == branch}
        return [s for s in rows if s.employee_id in in_branch]

    def schedule_for(self, *, employee_id: str, work_date: date) -> Optional[Schedule]:
        return self._schedules.get_for_employee_and_date(employee_id=employee_id, work_date=work_date)

    def next_schedule(self, *, employee_id: str, now: datetime) -> Optional[Schedule]:
        """Earliest upcoming shift; one that started within the last hour still counts."""

        threshold = now - timedelta(minutes=NEXT_SCHEDULE_LOOKBACK_MINUTES)
        rows = self._schedules.list_range(
            start=threshold.date(),
            end=now.date() + timedelta(days=_NEXT_SCHEDULE_HORIZON_DAYS),
            employee_id=employee_id,
        )
        upcoming = [s for s in rows if s.starts_at >= threshold]
        return min(upcoming, key=lambda s: s.starts_at, default=None)


def describe_start(schedule: Schedule, now: datetime) -> str:
    """Short countdown label for the next-shift card."""

    diff_hours = (schedule.starts_at - now).total_seconds() / 3600
    if diff_hours < 0:
        return "In progress"
    if diff_hours < 1:
        return "Starting soon"
    if diff_hours < 24:
        return f"In {int(diff_hours)} hours"
    days = int(diff_hours // 24)
    return "Tomorrow" if days == 1 else f"In {days} days"
