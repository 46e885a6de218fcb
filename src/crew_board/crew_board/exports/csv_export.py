"""Row builders and CSV encoding for payroll and attendance exports.

The same rows feed the CSV download and the spreadsheet upload, so the
filtering and ordering of both stay identical.
"""

from __future__ import annotations

import csv
import io
from typing import Iterable, Mapping, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import in_month, normalize_month
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..payroll.model import PayrollTable

PAYROLL_FIELDS = [
    "month",
    "branch",
    "name",
    "totalMinutes",
    "basePay",
    "holidayPay",
    "expenses",
    "taxAmount",
    "netPay",
]

PAYROLL_SHEET_FIELDS = [
    "month",
    "branch",
    "name",
    "totalMinutes",
    "basePay",
    "holidayPay",
    "expenses",
    "grossTotal",
    "taxAmount",
    "netPay",
]

ATTENDANCE_FIELDS = ["date", "employeeName", "branch", "status", "minutes"]


def payroll_rows(table: PayrollTable) -> list[dict]:
    """One row per employee, including ``grossTotal`` for the sheet upload."""

    return [
        {
            "month": table.month,
            "branch": row.employee.branch.value,
            "name": row.employee.name,
            "totalMinutes": row.statement.total_minutes,
            "basePay": row.statement.total_base_pay,
            "holidayPay": row.statement.total_holiday_pay,
            "expenses": row.statement.total_expenses,
            "grossTotal": row.statement.gross_total,
            "taxAmount": row.statement.tax_amount,
            "netPay": row.statement.grand_total,
        }
        for row in table.rows
    ]


def attendance_rows(
    month: str,
    records: Iterable[AttendanceRecord],
    employees: Mapping[str, Employee],
) -> list[dict]:
    """Settled attendance of one month, sorted by branch, employee name, date."""

    month = normalize_month(month)
    rows = []
    for r in records:
        if not in_month(r.work_date, month) or r.status == AttendanceStatus.PENDING_APPROVAL:
            continue
        emp = employees.get(r.employee_id)
        branch = emp.branch.value if emp else ""
        rows.append(
            {
                "month": month,
                "branchCode": branch,
                "branchName": branch,
                "employeeName": emp.name if emp else r.employee_id,
                "date": r.work_date.strftime("%Y-%m-%d"),
                "status": r.status.value,
                "minutes": int(r.accumulated_minutes or 0),
            }
        )

    rows.sort(key=lambda x: (x["branchCode"], x["employeeName"], x["date"]))
    return rows


def attendance_csv_rows(rows: Iterable[dict]) -> list[dict]:
    return [
        {
            "date": r["date"],
            "employeeName": r["employeeName"],
            "branch": r["branchName"],
            "status": r["status"],
            "minutes": r["minutes"],
        }
        for r in rows
    ]


def to_csv_bytes(rows: Sequence[dict], fieldnames: Sequence[str]) -> bytes:
    """UTF-8 with BOM so spreadsheet apps detect the encoding; extra keys are dropped."""

    if not rows:
        raise ValidationError("Nothing to export for this month")

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def build_payroll_csv(table: PayrollTable) -> bytes:
    return to_csv_bytes(payroll_rows(table), PAYROLL_FIELDS)


def build_attendance_csv(month: str, records: Iterable[AttendanceRecord], employees: Mapping[str, Employee]) -> bytes:
    return to_csv_bytes(attendance_csv_rows(attendance_rows(month, records, employees)), ATTENDANCE_FIELDS)
