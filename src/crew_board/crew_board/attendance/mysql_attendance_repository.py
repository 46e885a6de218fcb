from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, AttendanceTag
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT record_id, employee_id, work_date, clock_in, clock_out, accumulated_minutes, status, tag
    FROM attendance_records
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(r["record_id"]),
        employee_id=str(r["employee_id"]),
        work_date=normalize_mysql_date(r["work_date"]),
        clock_in=r["clock_in"],
        clock_out=r.get("clock_out"),
        accumulated_minutes=int(r.get("accumulated_minutes") or 0),
        status=AttendanceStatus(r["status"]),
        tag=AttendanceTag(r["tag"]) if r.get("tag") else None,
    )


def _params(record: AttendanceRecord) -> tuple:
    return (
        record.employee_id,
        record.work_date,
        record.clock_in,
        record.clock_out,
        int(record.accumulated_minutes),
        record.status.value,
        record.tag.value if record.tag else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE record_id=%s", (record_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, *, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE employee_id=%s AND work_date=%s ORDER BY clock_in DESC LIMIT 1",
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def latest_for_employee(self, employee_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE employee_id=%s ORDER BY clock_in DESC LIMIT 1", (employee_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_range(self, *, start: date, end: date, employee_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY work_date DESC, clock_in DESC", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: AttendanceRecord) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    record_id, employee_id, work_date, clock_in, clock_out, accumulated_minutes, status, tag
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (record.record_id,) + _params(record),
            )
            return record.record_id

    def update(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET employee_id=%s, work_date=%s, clock_in=%s, clock_out=%s,
                    accumulated_minutes=%s, status=%s, tag=%s
                WHERE record_id=%s
                """,
                _params(record) + (record.record_id,),
            )
            return cur.rowcount > 0

    def delete(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (record_id,))
            return cur.rowcount > 0
