from __future__ import annotations

import math
from typing import Iterable, Optional

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import weekday_label
from ...core.constants import TAX_RATE
from ...employees.model import WageConfig
from ...holidays.model import Holiday
from ..model import DailyWageRecord, MonthlyStatement
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Flat composite hourly wage, holiday premium per hour, 3.3% withholding.

    Every amount is floored at the step where it is produced (daily base,
    daily holiday premium, monthly tax, net).
    """

    def __init__(self, tax_rate: float = TAX_RATE):
        self._tax_rate = tax_rate

    def daily(self, record: AttendanceRecord, wage: WageConfig, holiday: Optional[Holiday]) -> DailyWageRecord:
        minutes = int(record.accumulated_minutes or 0)
        hours = minutes / 60

        base_pay = math.floor(hours * wage.hourly_wage)
        holiday_pay = math.floor(hours * holiday.extra_hourly_pay) if holiday else 0

        return DailyWageRecord(
            work_date=record.work_date,
            weekday=weekday_label(record.work_date),
            minutes=minutes,
            base_pay=base_pay,
            holiday_pay=holiday_pay,
            daily_total=base_pay + holiday_pay,
            is_holiday=holiday is not None,
            holiday_name=holiday.name if holiday else None,
            tag=record.tag,
        )

    def monthly(
        self,
        *,
        employee_id: str,
        month: str,
        records: Iterable[AttendanceRecord],
        wage: WageConfig,
        holidays: Iterable[Holiday],
        expenses: int,
    ) -> MonthlyStatement:
        by_date = {}
        for h in holidays:
            by_date.setdefault(h.holiday_date, h)

        days = [self.daily(r, wage, by_date.get(r.work_date)) for r in records]

        total_base = sum(d.base_pay for d in days)
        total_holiday = sum(d.holiday_pay for d in days)
        gross = total_base + total_holiday + int(expenses)
        tax = math.floor(gross * self._tax_rate)

        return MonthlyStatement(
            employee_id=employee_id,
            month=month,
            days=days,
            total_minutes=sum(d.minutes for d in days),
            total_base_pay=total_base,
            total_holiday_pay=total_holiday,
            total_expenses=int(expenses),
            gross_total=gross,
            tax_amount=tax,
            grand_total=math.floor(gross - tax),
        )
