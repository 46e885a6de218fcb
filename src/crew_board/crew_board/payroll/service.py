from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..attendance.aggregation import select_monthly_attendance
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import normalize_month
from ..core.enums import BranchCode, RequestStatus, RequestType
from ..core.exceptions import AuthorizationError, NotFoundError
from ..database.mysql_base import month_bounds
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import SessionUser
from ..holidays.model import Holiday
from ..holidays.repository import HolidayRepository
from ..requests.model import ApprovalRequest
from ..requests.repository import RequestRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import MonthlyStatement, PayrollRow, PayrollTable

logger = logging.getLogger(__name__)

_EXPENSE_SCAN_LIMIT = 100_000


class PayrollService:
    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        requests: RequestRepository,
        holidays: HolidayRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._requests = requests
        self._holidays = holidays
        self._calculator = calculator or StandardPayrollCalculator()

    def _month_inputs(
        self, month: str, employee_id: Optional[str] = None
    ) -> tuple[Sequence[AttendanceRecord], Sequence[ApprovalRequest], Sequence[Holiday]]:
        start, end = month_bounds(month)
        records = self._attendance.list_range(start=start, end=end, employee_id=employee_id)
        expenses = self._requests.list(
            employee_id=employee_id,
            status=RequestStatus.APPROVED,
            request_type=RequestType.EXPENSE,
            limit=_EXPENSE_SCAN_LIMIT,
        )
        return records, expenses, self._holidays.list_all()

    def _statement(
        self,
        employee: Employee,
        month: str,
        records: Sequence[AttendanceRecord],
        requests: Sequence[ApprovalRequest],
        holidays: Sequence[Holiday],
    ) -> MonthlyStatement:
        selected = select_monthly_attendance(employee.employee_id, month, records, requests)
        return self._calculator.monthly(
            employee_id=employee.employee_id,
            month=month,
            records=selected.records,
            wage=employee.wage,
            holidays=holidays,
            expenses=selected.expense_total,
        )

    def statement(self, *, actor: SessionUser, employee_id: str, month: str) -> MonthlyStatement:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not (actor.user_id == employee_id or actor.can_manage_branch(employee.branch)):
            raise AuthorizationError("You cannot view this pay statement")

        month = normalize_month(month)
        records, requests, holidays = self._month_inputs(month, employee_id)
        return self._statement(employee, month, records, requests, holidays)

    def branch_payroll(
        self,
        *,
        actor: SessionUser,
        month: str,
        branch: Optional[BranchCode] = None,
    ) -> PayrollTable:
        """Payroll table for all branches or one.

        Resigned employees only show up when they were paid something that month.
        """

        if not actor.is_manager:
            raise AuthorizationError("Only the manager can view payroll")

        month = normalize_month(month)
        records, requests, holidays = self._month_inputs(month)
        rows: list[PayrollRow] = []
        for employee in sorted(self._employees.list_all(), key=lambda e: (e.branch.value, e.name)):
            if branch is not None and employee.branch != branch:
                continue
            statement = self._statement(employee, month, records, requests, holidays)
            if employee.is_resigned and not statement.has_activity:
                continue
            rows.append(PayrollRow(employee=employee, statement=statement))

        table = PayrollTable(month=month, rows=rows)
        scope = branch.value if branch else "ALL"
        logger.info("payroll %s (%s): %d rows, net %d", month, scope, table.count, table.total_net_pay)
        return table
