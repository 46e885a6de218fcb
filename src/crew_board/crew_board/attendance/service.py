from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import format_elapsed, now_local, parse_hhmm
from ..common.ids import new_id
from ..core.enums import AttendanceStatus, BranchCode, RequestStatus, RequestType
from ..core.exceptions import (
    AuthorizationError,
    ClockInBlockedError,
    LateConfirmationRequired,
    NotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from ..employees.service import SessionUser
from ..requests.model import ApprovalRequest
from ..requests.repository import RequestRepository
from ..schedules.repository import ScheduleRepository
from .factory import ClockInStrategyFactory
from .model import AttendancePatch, AttendanceRecord
from .repository import AttendanceRepository
from .strategies.base import ClockInDecision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailySummary:
    work_date: date
    working_count: int
    attendance_count: int
    scheduled_count: int
    attendance_rate: int


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        requests: RequestRepository,
        employees: EmployeeRepository,
        *,
        strategy_factory: Optional[ClockInStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._requests = requests
        self._employees = employees
        self._factory = strategy_factory or ClockInStrategyFactory()

    def evaluate_clock_in(self, employee_id: str, *, now: Optional[datetime] = None) -> ClockInDecision:
        now = now or now_local()
        schedule = self._schedules.get_for_employee_and_date(employee_id=employee_id, work_date=now.date())
        strategy = self._factory.for_clock_in(now=now, schedule=schedule)
        return strategy.decide(now=now, schedule=schedule)

    def clock_in(
        self,
        employee_id: str,
        *,
        now: Optional[datetime] = None,
        confirm_late: bool = False,
    ) -> AttendanceRecord:
        now = now or now_local()

        if self.active_record(employee_id):
            raise ValidationError("You are already clocked in")

        decision = self.evaluate_clock_in(employee_id, now=now)
        if not decision.allowed:
            raise ClockInBlockedError(decision.block_reason)
        if decision.requires_confirmation and not confirm_late:
            raise LateConfirmationRequired("You are late, confirm to clock in anyway")

        record = AttendanceRecord(
            record_id=new_id("att"),
            employee_id=employee_id,
            work_date=now.date(),
            clock_in=now,
            status=AttendanceStatus.WORKING,
            tag=decision.tag,
        )
        self._attendance.create(record)
        logger.info("%s clocked in (%s)", employee_id, decision.tag.value)
        return record

    def clock_out(self, employee_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        record = self.active_record(employee_id)
        if not record:
            raise ValidationError("You are not clocked in")

        closed = record.closed_at(now)
        if not self._attendance.update(closed):
            raise ValidationError("Clock-out failed")
        logger.info("%s clocked out after %d minutes", employee_id, closed.accumulated_minutes)
        return closed

    def active_record(self, employee_id: str) -> Optional[AttendanceRecord]:
        latest = self._attendance.latest_for_employee(employee_id)
        if latest and latest.status == AttendanceStatus.WORKING:
            return latest
        return None

    def live_elapsed(self, employee_id: str, *, now: Optional[datetime] = None) -> Optional[str]:
        record = self.active_record(employee_id)
        if not record:
            return None
        return format_elapsed(record.clock_in, now or now_local())

    def minutes_on(self, employee_id: str, day: date) -> int:
        rows = self._attendance.list_range(start=day, end=day, employee_id=employee_id)
        return sum(r.accumulated_minutes for r in rows)

    def pending_clock_in_request(self, employee_id: str, day: date) -> Optional[ApprovalRequest]:
        rows = self._requests.list(
            employee_id=employee_id,
            status=RequestStatus.PENDING,
            request_type=RequestType.CLOCK_IN,
        )
        return next((r for r in rows if r.target_date == day), None)

    def _managed_record(self, actor: SessionUser, record_id: str) -> AttendanceRecord:
        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        employee = self._employees.get_by_id(record.employee_id)
        if not employee or not actor.can_manage_branch(employee.branch):
            raise AuthorizationError("You cannot edit attendance for this branch")
        return record

    def correct_record(
        self,
        *,
        actor: SessionUser,
        record_id: str,
        clock_in: str,
        clock_out: str = "",
    ) -> AttendanceRecord:
        """Manual fix with HH:MM times on the record's date.

        An empty clock-out re-opens the record as WORKING.
        """

        record = self._managed_record(actor, record_id)

        in_time = parse_hhmm(clock_in)
        if in_time is None:
            raise ValidationError("Clock-in time is required")
        out_time = parse_hhmm(clock_out)

        new_in = datetime.combine(record.work_date, in_time)
        if out_time is None:
            patch = AttendancePatch(clock_in=new_in, reopen=True)
        else:
            new_out = datetime.combine(record.work_date, out_time)
            if new_out < new_in:
                raise ValidationError("Clock-out cannot be before clock-in")
            patch = AttendancePatch(clock_in=new_in, clock_out=new_out, status=AttendanceStatus.OFF_WORK)

        updated = patch.apply(record)
        if not self._attendance.update(updated):
            raise ValidationError("Updating attendance failed")
        logger.info("attendance %s corrected by %s", record_id, actor.user_id)
        return updated

    def delete_record(self, *, actor: SessionUser, record_id: str) -> None:
        self._managed_record(actor, record_id)
        if not self._attendance.delete(record_id):
            raise ValidationError("Deleting attendance failed")

    def list_for_date(self, day: date, *, branch: Optional[BranchCode] = None) -> Sequence[AttendanceRecord]:
        rows = self._attendance.list_range(start=day, end=day)
        if branch is None:
            return list(rows)
        in_branch = {e.employee_id for e in self._employees.list_all() if e.branch == branch}
        return [r for r in rows if r.employee_id in in_branch]

    def daily_summary(self, day: date, *, branch: Optional[BranchCode] = None) -> DailySummary:
        records = self.list_for_date(day, branch=branch)
        schedules = self._schedules.list_range(start=day, end=day)
        if branch is not None:
            in_branch = {e.employee_id for e in self._employees.list_all() if e.branch == branch}
            schedules = [s for s in schedules if s.employee_id in in_branch]

        scheduled = len(schedules)
        rate = math.floor(len(records) / scheduled * 100 + 0.5) if scheduled else 0
        return DailySummary(
            work_date=day,
            working_count=sum(1 for r in records if r.status == AttendanceStatus.WORKING),
            attendance_count=len(records),
            scheduled_count=scheduled,
            attendance_rate=rate,
        )
