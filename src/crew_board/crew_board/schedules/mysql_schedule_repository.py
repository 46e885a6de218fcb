from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ScheduleType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, normalize_mysql_time
from .model import Schedule
from .repository import ScheduleRepository

_SELECT = "SELECT schedule_id, employee_id, work_date, start_time, end_time, schedule_type FROM schedules"


def _to_schedule(r: dict) -> Schedule:
    return Schedule(
        schedule_id=str(r["schedule_id"]),
        employee_id=str(r["employee_id"]),
        work_date=normalize_mysql_date(r["work_date"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        schedule_type=ScheduleType(r["schedule_type"]),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: str) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE schedule_id=%s", (schedule_id,))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def get_for_employee_and_date(self, *, employee_id: str, work_date: date) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE employee_id=%s AND work_date=%s ORDER BY start_time ASC LIMIT 1",
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_range(self, *, start: date, end: date, employee_id: Optional[str] = None) -> Sequence[Schedule]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY work_date ASC, start_time ASC", tuple(params))
            return [_to_schedule(r) for r in fetchall(cur)]

    def create(self, schedule: Schedule) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(schedule_id, employee_id, work_date, start_time, end_time, schedule_type)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    schedule.schedule_id,
                    schedule.employee_id,
                    schedule.work_date,
                    schedule.start_time,
                    schedule.end_time,
                    schedule.schedule_type.value,
                ),
            )
            return schedule.schedule_id

    def update(self, schedule: Schedule) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedules
                SET work_date=%s, start_time=%s, end_time=%s, schedule_type=%s
                WHERE schedule_id=%s
                """,
                (
                    schedule.work_date,
                    schedule.start_time,
                    schedule.end_time,
                    schedule.schedule_type.value,
                    schedule.schedule_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, schedule_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE schedule_id=%s", (schedule_id,))
            return cur.rowcount > 0
