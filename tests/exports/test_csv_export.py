from datetime import date, datetime

import pytest

from src.crew_board.crew_board.attendance.model import AttendanceRecord
from src.crew_board.crew_board.core.enums import AttendanceStatus, BranchCode
from src.crew_board.crew_board.core.exceptions import ValidationError
from src.crew_board.crew_board.exports.csv_export import (
    PAYROLL_FIELDS,
    attendance_rows,
    build_attendance_csv,
    build_payroll_csv,
    payroll_rows,
    to_csv_bytes,
)
from src.crew_board.crew_board.payroll.model import MonthlyStatement, PayrollRow, PayrollTable

from conftest import make_employee


def _record(record_id, employee_id, day, status=AttendanceStatus.OFF_WORK, minutes=480):
    return AttendanceRecord(
        record_id=record_id,
        employee_id=employee_id,
        work_date=day,
        clock_in=datetime.combine(day, datetime.min.time()),
        accumulated_minutes=minutes,
        status=status,
    )


EMPLOYEES = {
    "emp-b": make_employee("emp-b", "Yoon Seo", "010-1", "1111", branch=BranchCode.SWXC),
    "emp-a": make_employee("emp-a", "Han Bora", "010-2", "2222", branch=BranchCode.GDXC),
    "emp-c": make_employee("emp-c", "Ahn Jiho", "010-3", "3333", branch=BranchCode.GDXC),
}


def test_attendance_rows_filtered_and_ordered():
    records = [
        _record("r1", "emp-b", date(2024, 5, 1)),
        _record("r2", "emp-a", date(2024, 5, 9)),
        _record("r3", "emp-a", date(2024, 5, 3)),
        _record("r4", "emp-c", date(2024, 5, 20), status=AttendanceStatus.WORKING, minutes=0),
        _record("r5", "emp-a", date(2024, 5, 4), status=AttendanceStatus.PENDING_APPROVAL),
        _record("r6", "emp-a", date(2024, 6, 1)),
        _record("r7", "emp-ghost", date(2024, 5, 2)),
    ]

    rows = attendance_rows("2024-05", records, EMPLOYEES)

    assert [(r["branchCode"], r["employeeName"], r["date"]) for r in rows] == [
        ("", "emp-ghost", "2024-05-02"),
        ("GDXC", "Ahn Jiho", "2024-05-20"),
        ("GDXC", "Han Bora", "2024-05-03"),
        ("GDXC", "Han Bora", "2024-05-09"),
        ("SWXC", "Yoon Seo", "2024-05-01"),
    ]
    assert rows[1]["status"] == "WORKING"
    assert rows[2]["minutes"] == 480


def test_attendance_csv_has_bom_and_header():
    data = build_attendance_csv("2024-05", [_record("r1", "emp-a", date(2024, 5, 3))], EMPLOYEES)

    assert data.startswith(b"\xef\xbb\xbf")
    lines = data.decode("utf-8-sig").split("\n")
    assert lines[0] == "date,employeeName,branch,status,minutes"
    assert lines[1] == "2024-05-03,Han Bora,GDXC,OFF,480"


def test_values_with_commas_and_quotes_are_quoted():
    data = to_csv_bytes([{"a": 'Kim, "JJ"', "b": 1}], ["a", "b"])

    assert data.decode("utf-8-sig") == 'a,b\n"Kim, ""JJ""",1\n'


def test_empty_export_is_rejected():
    with pytest.raises(ValidationError):
        build_attendance_csv("2024-05", [], EMPLOYEES)
    with pytest.raises(ValidationError):
        build_payroll_csv(PayrollTable(month="2024-05", rows=[]))


def test_payroll_rows_and_csv_columns():
    statement = MonthlyStatement(
        employee_id="emp-a",
        month="2024-05",
        total_minutes=480,
        total_base_pay=80000,
        total_holiday_pay=0,
        total_expenses=5000,
        gross_total=85000,
        tax_amount=2805,
        grand_total=82195,
    )
    table = PayrollTable(month="2024-05", rows=[PayrollRow(employee=EMPLOYEES["emp-a"], statement=statement)])

    rows = payroll_rows(table)
    assert rows[0]["grossTotal"] == 85000
    assert rows[0]["netPay"] == 82195

    lines = build_payroll_csv(table).decode("utf-8-sig").strip().split("\n")
    assert lines[0] == ",".join(PAYROLL_FIELDS)
    assert lines[1] == "2024-05,GDXC,Han Bora,480,80000,0,5000,2805,82195"


def test_attendance_rows_accept_unpadded_month():
    rows = attendance_rows("2024-5", [_record("r1", "emp-a", date(2024, 5, 3))], EMPLOYEES)

    assert [r["month"] for r in rows] == ["2024-05"]
