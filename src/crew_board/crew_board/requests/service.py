from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Dict, Optional, Sequence

from ..attendance.model import AttendancePatch, AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import elapsed_minutes, now_local, parse_hhmm
from ..common.ids import new_id
from ..common.mutations import MutationLog, reversible
from ..common.validators import optional_text, require_non_empty, require_positive_amount
from ..core.constants import (
    CLOCK_IN_REASON_LABELS,
    DEFAULT_REQUEST_LIST_LIMIT,
    SUBSTITUTE_ACCEPTED_MARK,
    SUBSTITUTE_REJECTED_MARK,
)
from ..core.enums import (
    AttendanceStatus,
    AttendanceTag,
    ClockInBlockReason,
    RequestStatus,
    RequestType,
    SubstituteStatus,
)
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..employees.service import SessionUser
from ..schedules.repository import ScheduleRepository
from .model import ApprovalRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)


class RequestService:
    """Approval workflow: crew submit, colleagues answer substitute asks, the manager decides."""

    def __init__(
        self,
        requests: RequestRepository,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        employees: EmployeeRepository,
    ):
        self._requests = requests
        self._attendance = attendance
        self._schedules = schedules
        self._employees = employees
        self._approval_effects: Dict[RequestType, Callable[[MutationLog, ApprovalRequest, datetime], None]] = {
            RequestType.CLOCK_IN: self._approve_clock_in,
            RequestType.CORRECTION: self._approve_correction,
        }

    # ---- submissions ----

    @staticmethod
    def _require_crew(actor: SessionUser) -> None:
        if actor.is_manager:
            raise AuthorizationError("Only crew members can send requests")

    def _get(self, request_id: str) -> ApprovalRequest:
        req = self._requests.get(request_id)
        if not req:
            raise NotFoundError("Request not found")
        return req

    def _create(self, req: ApprovalRequest) -> ApprovalRequest:
        self._requests.create(req)
        logger.info("%s request %s sent by %s", req.request_type.value, req.request_id, req.employee_id)
        return req

    @staticmethod
    def _combine(target_date: date, value: str) -> Optional[datetime]:
        t = parse_hhmm(value)
        return datetime.combine(target_date, t) if t else None

    def submit_timed(
        self,
        *,
        actor: SessionUser,
        request_type: RequestType,
        target_date: date,
        description: str,
        start_time: str = "",
        end_time: str = "",
        now: Optional[datetime] = None,
    ) -> ApprovalRequest:
        """CORRECTION, LEAVE or OVERTIME request with optional HH:MM times on the target date."""

        self._require_crew(actor)
        if request_type not in (RequestType.CORRECTION, RequestType.LEAVE, RequestType.OVERTIME):
            raise ValidationError(f"{request_type.value} requests are not sent with this form")

        start = self._combine(target_date, start_time)
        end = self._combine(target_date, end_time)
        if start and end and end < start:
            raise ValidationError("End time cannot be before start time")

        return self._create(
            ApprovalRequest(
                request_id=new_id("req"),
                employee_id=actor.user_id,
                request_type=request_type,
                description=require_non_empty(description, "Description"),
                status=RequestStatus.PENDING,
                request_date=(now or now_local()).date(),
                target_date=target_date,
                start_time=start,
                end_time=end,
            )
        )

    def submit_expense(
        self,
        *,
        actor: SessionUser,
        target_date: date,
        description: str,
        amount,
        proof_image_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ApprovalRequest:
        self._require_crew(actor)
        return self._create(
            ApprovalRequest(
                request_id=new_id("req"),
                employee_id=actor.user_id,
                request_type=RequestType.EXPENSE,
                description=require_non_empty(description, "Description"),
                status=RequestStatus.PENDING,
                request_date=(now or now_local()).date(),
                target_date=target_date,
                expense_amount=require_positive_amount(amount, "Expense amount"),
                proof_image_url=optional_text(proof_image_url),
            )
        )

    def submit_clock_in(
        self,
        *,
        actor: SessionUser,
        reason: ClockInBlockReason,
        note: str,
        now: Optional[datetime] = None,
    ) -> ApprovalRequest:
        """Filed after a blocked direct clock-in; the attempt time becomes the requested start."""

        self._require_crew(actor)
        now = now or now_local()
        note = require_non_empty(note, "Reason")
        return self._create(
            ApprovalRequest(
                request_id=new_id("req"),
                employee_id=actor.user_id,
                request_type=RequestType.CLOCK_IN,
                description=f"[{CLOCK_IN_REASON_LABELS[reason.value]}] {note}",
                status=RequestStatus.PENDING,
                request_date=now.date(),
                target_date=now.date(),
                start_time=now,
            )
        )

    def submit_substitute(
        self,
        *,
        actor: SessionUser,
        schedule_id: str,
        substitute_id: str,
        now: Optional[datetime] = None,
    ) -> ApprovalRequest:
        self._require_crew(actor)

        schedule = self._schedules.get_by_id(schedule_id)
        if not schedule:
            raise NotFoundError("Schedule not found")
        if schedule.employee_id != actor.user_id:
            raise AuthorizationError("You can only hand off your own shifts")
        if substitute_id == actor.user_id:
            raise ValidationError("Pick a colleague other than yourself")

        colleague = self._employees.get_by_id(substitute_id)
        if not colleague or colleague.is_resigned:
            raise ValidationError("Colleague not found")

        start = schedule.start_time.strftime("%H:%M")
        end = schedule.end_time.strftime("%H:%M")
        return self._create(
            ApprovalRequest(
                request_id=new_id("req"),
                employee_id=actor.user_id,
                request_type=RequestType.SUBSTITUTE,
                description=f"Substitute request: [{actor.name}] -> [{colleague.name}] ({start}~{end})",
                status=RequestStatus.PENDING,
                request_date=(now or now_local()).date(),
                target_date=schedule.work_date,
                substitute_id=colleague.employee_id,
                substitute_status=SubstituteStatus.PENDING,
            )
        )

    def cancel(self, *, actor: SessionUser, request_id: str) -> None:
        req = self._get(request_id)
        if req.employee_id != actor.user_id:
            raise AuthorizationError("You can only cancel your own requests")
        if not req.is_pending:
            raise InvalidTransitionError("Only pending requests can be cancelled")
        if not self._requests.delete(request_id):
            raise ValidationError("Cancelling request failed")

    # ---- substitute handshake ----

    def respond_to_substitute(self, *, actor: SessionUser, request_id: str, accept: bool) -> ApprovalRequest:
        req = self._get(request_id)
        if req.request_type != RequestType.SUBSTITUTE or req.substitute_id != actor.user_id:
            raise AuthorizationError("This substitute request is not addressed to you")
        if not req.is_pending or not req.awaiting_colleague:
            raise InvalidTransitionError("This substitute request was already answered")

        if accept:
            updated = replace(
                req,
                substitute_status=SubstituteStatus.ACCEPTED,
                status=RequestStatus.PENDING,
                description=f"{SUBSTITUTE_ACCEPTED_MARK} {req.description}",
            )
        else:
            updated = replace(
                req,
                substitute_status=SubstituteStatus.REJECTED,
                status=RequestStatus.REJECTED,
                description=f"{SUBSTITUTE_REJECTED_MARK} {req.description}",
            )

        if not self._requests.update(updated):
            raise ValidationError("Saving your answer failed")
        logger.info("substitute %s %s by %s", request_id, updated.substitute_status.value, actor.user_id)
        return updated

    # ---- manager decision ----

    def decide(
        self,
        *,
        actor: SessionUser,
        request_id: str,
        approve: bool,
        now: Optional[datetime] = None,
    ) -> ApprovalRequest:
        if not actor.is_manager:
            raise AuthorizationError("Only the manager can approve or reject requests")

        req = self._get(request_id)
        if not req.is_pending:
            raise InvalidTransitionError(f"Request is already {req.status.value}")
        if approve and req.request_type == RequestType.SUBSTITUTE and req.substitute_status != SubstituteStatus.ACCEPTED:
            raise InvalidTransitionError("The colleague has not accepted this substitute request yet")

        decided = replace(req, status=RequestStatus.APPROVED if approve else RequestStatus.REJECTED)
        now = now or now_local()

        with reversible(f"decide request {request_id}") as log:
            log.apply(
                "request status",
                lambda: self._requests.update(decided),
                lambda: self._requests.update(req),
            )
            effect = self._approval_effects.get(req.request_type) if approve else None
            if effect:
                effect(log, decided, now)

        logger.info("request %s %s", request_id, decided.status.value)
        return decided

    def _approve_clock_in(self, log: MutationLog, req: ApprovalRequest, now: datetime) -> None:
        record = AttendanceRecord(
            record_id=f"att-req-{req.request_id}",
            employee_id=req.employee_id,
            work_date=req.target_date,
            clock_in=req.start_time or now,
            status=AttendanceStatus.WORKING,
            tag=AttendanceTag.OUTSIDE_SCHEDULE,
        )
        log.apply(
            "clock-in record",
            lambda: self._attendance.create(record),
            lambda: self._attendance.delete(record.record_id),
        )

    def _approve_correction(self, log: MutationLog, req: ApprovalRequest, now: datetime) -> None:
        existing = self._attendance.get_for_employee_and_date(employee_id=req.employee_id, work_date=req.target_date)
        if existing:
            patch = AttendancePatch(
                clock_in=req.start_time,
                clock_out=req.end_time,
                status=AttendanceStatus.OFF_WORK if req.end_time else None,
                tag=AttendanceTag.NORMAL,
            )
            updated = patch.apply(existing)
            log.apply(
                "corrected record",
                lambda: self._attendance.update(updated),
                lambda: self._attendance.update(existing),
            )
            return

        clock_in = req.start_time or now
        record = AttendanceRecord(
            record_id=f"att-cor-{req.request_id}",
            employee_id=req.employee_id,
            work_date=req.target_date,
            clock_in=clock_in,
            clock_out=req.end_time,
            accumulated_minutes=elapsed_minutes(clock_in, req.end_time) if req.end_time else 0,
            status=AttendanceStatus.OFF_WORK if req.end_time else AttendanceStatus.WORKING,
            tag=AttendanceTag.NORMAL,
        )
        log.apply(
            "correction record",
            lambda: self._attendance.create(record),
            lambda: self._attendance.delete(record.record_id),
        )

    # ---- listings ----

    def list_mine(self, *, actor: SessionUser, limit: int = DEFAULT_REQUEST_LIST_LIMIT) -> Sequence[ApprovalRequest]:
        rows = self._requests.list(employee_id=actor.user_id, limit=limit)
        return sorted(rows, key=lambda r: r.request_date, reverse=True)

    def list_received_substitutes(self, *, actor: SessionUser) -> Sequence[ApprovalRequest]:
        """Substitute asks waiting for this colleague's answer."""

        rows = self._requests.list(substitute_id=actor.user_id, request_type=RequestType.SUBSTITUTE)
        return [r for r in rows if r.is_pending and r.awaiting_colleague]

    def list_for_manager(
        self,
        *,
        actor: SessionUser,
        status: Optional[RequestStatus] = RequestStatus.PENDING,
        limit: int = DEFAULT_REQUEST_LIST_LIMIT,
    ) -> Sequence[ApprovalRequest]:
        if not actor.is_manager:
            raise AuthorizationError("Only the manager can review requests")
        return self._requests.list(status=status, limit=limit)

    def pending_count(self) -> int:
        return len(self._requests.list(status=RequestStatus.PENDING, limit=10_000))
