from datetime import date, datetime

import pytest

from src.crew_board.crew_board.attendance.model import AttendanceRecord
from src.crew_board.crew_board.core.enums import AttendanceStatus, BranchCode, RequestStatus, RequestType
from src.crew_board.crew_board.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.crew_board.crew_board.holidays.model import Holiday
from src.crew_board.crew_board.requests.model import ApprovalRequest


def _worked(repos, record_id, employee_id, day, minutes, status=AttendanceStatus.OFF_WORK):
    repos.attendance.create(
        AttendanceRecord(
            record_id=record_id,
            employee_id=employee_id,
            work_date=day,
            clock_in=datetime.combine(day, datetime.min.time()),
            accumulated_minutes=minutes,
            status=status,
        )
    )


def _expense(repos, request_id, employee_id, day, amount, status=RequestStatus.APPROVED):
    repos.requests.create(
        ApprovalRequest(
            request_id=request_id,
            employee_id=employee_id,
            request_type=RequestType.EXPENSE,
            description="supplies",
            status=status,
            request_date=day,
            target_date=day,
            expense_amount=amount,
        )
    )


@pytest.fixture
def may(repos):
    _worked(repos, "a1", "emp-crew", date(2024, 5, 2), 480)
    _worked(repos, "a2", "emp-crew", date(2024, 5, 5), 120)
    _worked(repos, "a3", "emp-crew", date(2024, 5, 6), 60, status=AttendanceStatus.PENDING_APPROVAL)
    _worked(repos, "a4", "emp-other", date(2024, 5, 2), 60)
    _worked(repos, "a5", "emp-crew", date(2024, 6, 1), 600)
    _expense(repos, "r1", "emp-crew", date(2024, 5, 9), 10000)
    _expense(repos, "r2", "emp-crew", date(2024, 5, 10), 99999, status=RequestStatus.PENDING)
    repos.holidays.create(
        Holiday(holiday_id="hol-1", holiday_date=date(2024, 5, 5), name="Children's Day", extra_hourly_pay=4930)
    )


def test_statement_combines_wage_holiday_and_expenses(container, crew, may):
    statement = container.payroll_service.statement(actor=crew, employee_id="emp-crew", month="2024-05")

    assert [d.work_date for d in statement.days] == [date(2024, 5, 5), date(2024, 5, 2)]
    assert statement.total_minutes == 600
    assert statement.total_base_pay == 100000
    assert statement.total_holiday_pay == 9860
    assert statement.total_expenses == 10000
    assert statement.gross_total == 119860
    assert statement.tax_amount == 3955
    assert statement.grand_total == 115905


def test_statement_access(container, leader, other_branch_crew, may):
    svc = container.payroll_service
    assert svc.statement(actor=leader, employee_id="emp-crew", month="2024-05").total_minutes == 600
    with pytest.raises(AuthorizationError):
        svc.statement(actor=other_branch_crew, employee_id="emp-crew", month="2024-05")
    with pytest.raises(NotFoundError):
        svc.statement(actor=leader, employee_id="emp-missing", month="2024-05")
    with pytest.raises(ValidationError):
        svc.statement(actor=leader, employee_id="emp-crew", month="2024-5-1")


def test_branch_payroll_skips_idle_resigned_employees(container, repos, manager, may):
    table = container.payroll_service.branch_payroll(actor=manager, month="2024-05")

    assert [r.employee.employee_id for r in table.rows] == ["emp-leader", "emp-crew", "emp-other"]
    assert table.count == 3
    assert table.total_net_pay == sum(r.statement.grand_total for r in table.rows)

    _worked(repos, "a6", "emp-gone", date(2024, 5, 3), 30)
    table = container.payroll_service.branch_payroll(actor=manager, month="2024-05", branch=BranchCode.GDXC)
    assert [r.employee.employee_id for r in table.rows] == ["emp-gone", "emp-leader", "emp-crew"]


def test_branch_payroll_is_manager_only(container, leader):
    with pytest.raises(AuthorizationError):
        container.payroll_service.branch_payroll(actor=leader, month="2024-05")


@pytest.mark.parametrize("month", ["2024-5", " 2024-05 "])
def test_month_spelling_does_not_change_statement(container, crew, manager, may, month):
    statement = container.payroll_service.statement(actor=crew, employee_id="emp-crew", month=month)

    assert statement.month == "2024-05"
    assert statement.grand_total == 115905
    table = container.payroll_service.branch_payroll(actor=manager, month=month)
    assert table.month == "2024-05"
    assert table.total_net_pay > 0
