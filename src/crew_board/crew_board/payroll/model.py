from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceTag
from ..employees.model import Employee


@dataclass(frozen=True)
class DailyWageRecord:
    work_date: date
    weekday: str
    minutes: int
    base_pay: int
    holiday_pay: int
    daily_total: int
    is_holiday: bool = False
    holiday_name: Optional[str] = None
    tag: Optional[AttendanceTag] = None


@dataclass(frozen=True)
class MonthlyStatement:
    """Pay statement of one employee for one month. All amounts in won."""

    employee_id: str
    month: str
    days: Sequence[DailyWageRecord] = field(default_factory=list)
    total_minutes: int = 0
    total_base_pay: int = 0
    total_holiday_pay: int = 0
    total_expenses: int = 0
    gross_total: int = 0
    tax_amount: int = 0
    grand_total: int = 0

    @property
    def has_activity(self) -> bool:
        return bool(self.days) or self.total_expenses > 0


@dataclass(frozen=True)
class PayrollRow:
    employee: Employee
    statement: MonthlyStatement


@dataclass(frozen=True)
class PayrollTable:
    month: str
    rows: Sequence[PayrollRow]

    @property
    def count(self) -> int:
        return len(self.rows)

    @property
    def total_net_pay(self) -> int:
        return sum(r.statement.grand_total for r in self.rows)
