from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_id, holiday_date, name, extra_hourly_pay FROM holidays ORDER BY holiday_date ASC"
            )
            return [
                Holiday(
                    holiday_id=str(r["holiday_id"]),
                    holiday_date=normalize_mysql_date(r["holiday_date"]),
                    name=r["name"],
                    extra_hourly_pay=int(r.get("extra_hourly_pay") or 0),
                )
                for r in fetchall(cur)
            ]

    def create(self, holiday: Holiday) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(holiday_id, holiday_date, name, extra_hourly_pay) VALUES(%s,%s,%s,%s)",
                (holiday.holiday_id, holiday.holiday_date, holiday.name, int(holiday.extra_hourly_pay)),
            )
            return holiday.holiday_id
