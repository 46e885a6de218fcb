"""Monthly selection of attendance and approved expenses for one employee.

Pure functions: callers pass whatever slice of records/requests they loaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import in_month, normalize_month
from ..core.enums import AttendanceStatus, RequestStatus, RequestType
from ..requests.model import ApprovalRequest
from .model import AttendanceRecord


@dataclass(frozen=True)
class MonthlyAttendance:
    records: Sequence[AttendanceRecord]
    expense_total: int


def select_monthly_attendance(
    employee_id: Optional[str],
    month: str,
    records: Iterable[AttendanceRecord],
    requests: Iterable[ApprovalRequest],
) -> MonthlyAttendance:
    month = normalize_month(month)
    if not employee_id:
        return MonthlyAttendance(records=[], expense_total=0)

    selected = [
        r
        for r in records
        if r.employee_id == employee_id
        and in_month(r.work_date, month)
        and r.status != AttendanceStatus.PENDING_APPROVAL
    ]
    selected.sort(key=lambda r: (r.work_date, r.clock_in), reverse=True)

    expense_total = sum(
        int(q.expense_amount or 0)
        for q in requests
        if q.employee_id == employee_id
        and q.request_type == RequestType.EXPENSE
        and q.status == RequestStatus.APPROVED
        and in_month(q.target_date, month)
    )
    return MonthlyAttendance(records=selected, expense_total=expense_total)
