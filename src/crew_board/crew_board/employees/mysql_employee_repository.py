from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import BranchCode, EmployeeRank
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Employee, WageConfig
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, name, phone, pin, branch, rank_code, bank_name, account_number,
    wage_basic, wage_responsibility, wage_incentive, wage_special, join_date, is_resigned
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["employee_id"]),
        name=r["name"],
        phone=r["phone"],
        pin=r["pin"],
        branch=BranchCode(r["branch"]),
        rank=EmployeeRank(r["rank_code"]),
        wage=WageConfig(
            basic=int(r.get("wage_basic") or 0),
            responsibility=int(r.get("wage_responsibility") or 0),
            incentive=int(r.get("wage_incentive") or 0),
            special=int(r.get("wage_special") or 0),
        ),
        join_date=normalize_mysql_date(r.get("join_date")),
        bank_name=r.get("bank_name"),
        account_number=r.get("account_number"),
        is_resigned=bool(r.get("is_resigned")),
    )


def _params(e: Employee) -> tuple:
    return (
        e.name,
        e.phone,
        e.pin,
        e.branch.value,
        e.rank.value,
        e.bank_name,
        e.account_number,
        e.wage.basic,
        e.wage.responsibility,
        e.wage.incentive,
        e.wage.special,
        e.join_date,
        1 if e.is_resigned else 0,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY name ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, employee: Employee) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO employees({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (employee.employee_id,) + _params(employee),
            )
            return employee.employee_id

    def update(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET name=%s, phone=%s, pin=%s, branch=%s, rank_code=%s, bank_name=%s, account_number=%s,
                    wage_basic=%s, wage_responsibility=%s, wage_incentive=%s, wage_special=%s,
                    join_date=%s, is_resigned=%s
                WHERE employee_id=%s
                """,
                _params(employee) + (employee.employee_id,),
            )
            return cur.rowcount > 0
