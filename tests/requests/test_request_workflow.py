from datetime import date, datetime, time

import pytest

from src.crew_board.crew_board.attendance.model import AttendanceRecord
from src.crew_board.crew_board.core.constants import SUBSTITUTE_ACCEPTED_MARK, SUBSTITUTE_REJECTED_MARK
from src.crew_board.crew_board.core.enums import (
    AttendanceStatus,
    AttendanceTag,
    ClockInBlockReason,
    RequestStatus,
    RequestType,
    SubstituteStatus,
)
from src.crew_board.crew_board.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.crew_board.crew_board.schedules.model import Schedule

DAY = date(2024, 5, 2)
NOW = datetime(2024, 5, 2, 7, 30)


def test_crew_submits_correction_with_times(container, crew):
    req = container.request_service.submit_timed(
        actor=crew,
        request_type=RequestType.CORRECTION,
        target_date=DAY,
        description="  forgot to clock out ",
        start_time="09:00",
        end_time="18:00",
        now=NOW,
    )

    assert req.status == RequestStatus.PENDING
    assert req.description == "forgot to clock out"
    assert req.start_time == datetime(2024, 5, 2, 9, 0)
    assert req.end_time == datetime(2024, 5, 2, 18, 0)
    assert req.request_date == DAY


def test_submission_validation(container, crew, manager):
    svc = container.request_service
    with pytest.raises(ValidationError):
        svc.submit_timed(actor=crew, request_type=RequestType.LEAVE, target_date=DAY, description=" ", now=NOW)
    with pytest.raises(ValidationError):
        svc.submit_timed(
            actor=crew,
            request_type=RequestType.OVERTIME,
            target_date=DAY,
            description="late close",
            start_time="20:00",
            end_time="19:00",
            now=NOW,
        )
    with pytest.raises(ValidationError):
        svc.submit_expense(actor=crew, target_date=DAY, description="taxi", amount=0, now=NOW)
    with pytest.raises(AuthorizationError):
        svc.submit_expense(actor=manager, target_date=DAY, description="taxi", amount=100, now=NOW)


def test_clock_in_request_prefixes_reason(container, crew):
    req = container.request_service.submit_clock_in(
        actor=crew, reason=ClockInBlockReason.EARLY, note="bus came early", now=NOW
    )

    assert req.request_type == RequestType.CLOCK_IN
    assert req.description == "[Early clock-in] bus came early"
    assert req.start_time == NOW


def test_approving_clock_in_request_opens_outside_schedule_record(container, repos, crew, manager):
    req = container.request_service.submit_clock_in(
        actor=crew, reason=ClockInBlockReason.NO_SCHEDULE, note="covering", now=NOW
    )

    decided = container.request_service.decide(actor=manager, request_id=req.request_id, approve=True)

    assert decided.status == RequestStatus.APPROVED
    record = repos.attendance.get_by_id(f"att-req-{req.request_id}")
    assert record.clock_in == NOW
    assert record.status == AttendanceStatus.WORKING
    assert record.tag == AttendanceTag.OUTSIDE_SCHEDULE


def test_rejecting_has_no_side_effect(container, repos, crew, manager):
    req = container.request_service.submit_clock_in(
        actor=crew, reason=ClockInBlockReason.NO_SCHEDULE, note="covering", now=NOW
    )

    decided = container.request_service.decide(actor=manager, request_id=req.request_id, approve=False)

    assert decided.status == RequestStatus.REJECTED
    assert repos.attendance.rows == {}


def test_approving_correction_updates_existing_record(container, repos, crew, manager):
    repos.attendance.create(
        AttendanceRecord(
            record_id="att-1",
            employee_id="emp-crew",
            work_date=DAY,
            clock_in=datetime(2024, 5, 2, 9, 0),
            tag=AttendanceTag.LATE,
        )
    )
    req = container.request_service.submit_timed(
        actor=crew,
        request_type=RequestType.CORRECTION,
        target_date=DAY,
        description="left at five",
        start_time="09:30",
        end_time="17:00",
        now=NOW,
    )

    container.request_service.decide(actor=manager, request_id=req.request_id, approve=True)

    record = repos.attendance.get_by_id("att-1")
    assert record.clock_in == datetime(2024, 5, 2, 9, 30)
    assert record.clock_out == datetime(2024, 5, 2, 17, 0)
    assert record.accumulated_minutes == 450
    assert record.status == AttendanceStatus.OFF_WORK
    assert record.tag == AttendanceTag.NORMAL


def test_approving_correction_without_record_creates_one(container, repos, crew, manager):
    req = container.request_service.submit_timed(
        actor=crew,
        request_type=RequestType.CORRECTION,
        target_date=DAY,
        description="forgot everything",
        start_time="10:00",
        end_time="12:00",
        now=NOW,
    )

    container.request_service.decide(actor=manager, request_id=req.request_id, approve=True)

    record = repos.attendance.get_by_id(f"att-cor-{req.request_id}")
    assert record.accumulated_minutes == 120
    assert record.status == AttendanceStatus.OFF_WORK


def test_decided_requests_are_terminal(container, crew, manager):
    req = container.request_service.submit_timed(
        actor=crew, request_type=RequestType.LEAVE, target_date=DAY, description="family", now=NOW
    )
    container.request_service.decide(actor=manager, request_id=req.request_id, approve=False)

    with pytest.raises(InvalidTransitionError):
        container.request_service.decide(actor=manager, request_id=req.request_id, approve=True)
    with pytest.raises(InvalidTransitionError):
        container.request_service.cancel(actor=crew, request_id=req.request_id)


def test_only_manager_decides(container, crew, leader):
    req = container.request_service.submit_timed(
        actor=crew, request_type=RequestType.LEAVE, target_date=DAY, description="family", now=NOW
    )

    with pytest.raises(AuthorizationError):
        container.request_service.decide(actor=leader, request_id=req.request_id, approve=True)


def test_failed_side_effect_rolls_back_decision(container, repos, crew, manager):
    req = container.request_service.submit_clock_in(
        actor=crew, reason=ClockInBlockReason.NO_SCHEDULE, note="covering", now=NOW
    )
    repos.attendance.fail_writes = True

    with pytest.raises(PersistenceError):
        container.request_service.decide(actor=manager, request_id=req.request_id, approve=True)

    assert repos.requests.get(req.request_id).status == RequestStatus.PENDING
    assert repos.attendance.rows == {}


def test_cancel_own_pending_request(container, repos, crew, leader):
    req = container.request_service.submit_timed(
        actor=crew, request_type=RequestType.LEAVE, target_date=DAY, description="family", now=NOW
    )

    with pytest.raises(AuthorizationError):
        container.request_service.cancel(actor=leader, request_id=req.request_id)

    container.request_service.cancel(actor=crew, request_id=req.request_id)
    assert repos.requests.get(req.request_id) is None
    with pytest.raises(NotFoundError):
        container.request_service.cancel(actor=crew, request_id=req.request_id)


@pytest.fixture
def shift(repos):
    s = Schedule(schedule_id="sch-1", employee_id="emp-crew", work_date=DAY, start_time=time(9, 0), end_time=time(18, 0))
    repos.schedules.create(s)
    return s


def test_substitute_handshake_then_approval(container, crew, leader, manager, shift):
    svc = container.request_service
    req = svc.submit_substitute(actor=crew, schedule_id=shift.schedule_id, substitute_id="emp-leader", now=NOW)

    assert req.substitute_status == SubstituteStatus.PENDING
    assert req.description == "Substitute request: [Lee Dohyun] -> [Kim Jisu] (09:00~18:00)"
    assert [r.request_id for r in svc.list_received_substitutes(actor=leader)] == [req.request_id]

    with pytest.raises(InvalidTransitionError):
        svc.decide(actor=manager, request_id=req.request_id, approve=True)

    accepted = svc.respond_to_substitute(actor=leader, request_id=req.request_id, accept=True)
    assert accepted.substitute_status == SubstituteStatus.ACCEPTED
    assert accepted.status == RequestStatus.PENDING
    assert accepted.description.startswith(SUBSTITUTE_ACCEPTED_MARK)
    assert svc.list_received_substitutes(actor=leader) == []

    with pytest.raises(InvalidTransitionError):
        svc.respond_to_substitute(actor=leader, request_id=req.request_id, accept=False)

    approved = svc.decide(actor=manager, request_id=req.request_id, approve=True)
    assert approved.status == RequestStatus.APPROVED


def test_colleague_declining_rejects_request(container, crew, leader, other_branch_crew, shift):
    svc = container.request_service
    req = svc.submit_substitute(actor=crew, schedule_id=shift.schedule_id, substitute_id="emp-leader", now=NOW)

    with pytest.raises(AuthorizationError):
        svc.respond_to_substitute(actor=other_branch_crew, request_id=req.request_id, accept=True)

    declined = svc.respond_to_substitute(actor=leader, request_id=req.request_id, accept=False)
    assert declined.status == RequestStatus.REJECTED
    assert declined.substitute_status == SubstituteStatus.REJECTED
    assert declined.description.startswith(SUBSTITUTE_REJECTED_MARK)


def test_substitute_request_checks(container, crew, other_branch_crew, shift):
    svc = container.request_service
    with pytest.raises(AuthorizationError):
        svc.submit_substitute(actor=other_branch_crew, schedule_id=shift.schedule_id, substitute_id="emp-leader")
    with pytest.raises(ValidationError):
        svc.submit_substitute(actor=crew, schedule_id=shift.schedule_id, substitute_id="emp-crew")
    with pytest.raises(ValidationError):
        svc.submit_substitute(actor=crew, schedule_id=shift.schedule_id, substitute_id="emp-gone")
    with pytest.raises(NotFoundError):
        svc.submit_substitute(actor=crew, schedule_id="sch-missing", substitute_id="emp-leader")


def test_listings(container, crew, manager):
    svc = container.request_service
    first = svc.submit_timed(
        actor=crew, request_type=RequestType.LEAVE, target_date=DAY, description="a", now=datetime(2024, 5, 1, 8)
    )
    second = svc.submit_expense(
        actor=crew, target_date=DAY, description="taxi", amount="15000", now=datetime(2024, 5, 3, 8)
    )

    assert [r.request_id for r in svc.list_mine(actor=crew)] == [second.request_id, first.request_id]
    assert second.expense_amount == 15000
    assert svc.pending_count() == 2

    svc.decide(actor=manager, request_id=first.request_id, approve=True)
    assert [r.request_id for r in svc.list_for_manager(actor=manager)] == [second.request_id]
    assert len(svc.list_for_manager(actor=manager, status=None)) == 2
    with pytest.raises(AuthorizationError):
        svc.list_for_manager(actor=crew)


def test_approving_correction_that_changes_nothing(container, repos, crew, manager):
    existing = AttendanceRecord(
        record_id="att-1",
        employee_id="emp-crew",
        work_date=DAY,
        clock_in=datetime(2024, 5, 2, 9, 0),
        clock_out=datetime(2024, 5, 2, 17, 0),
        accumulated_minutes=480,
        status=AttendanceStatus.OFF_WORK,
        tag=AttendanceTag.NORMAL,
    )
    repos.attendance.create(existing)
    req = container.request_service.submit_timed(
        actor=crew,
        request_type=RequestType.CORRECTION,
        target_date=DAY,
        description="double check",
        start_time="09:00",
        end_time="17:00",
        now=NOW,
    )

    decided = container.request_service.decide(actor=manager, request_id=req.request_id, approve=True)

    assert decided.status == RequestStatus.APPROVED
    assert repos.requests.get(req.request_id).status == RequestStatus.APPROVED
    assert repos.attendance.get_by_id("att-1") == existing
