from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ...attendance.model import AttendanceRecord
from ...employees.model import WageConfig
from ...holidays.model import Holiday
from ..model import DailyWageRecord, MonthlyStatement


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def daily(self, record: AttendanceRecord, wage: WageConfig, holiday: Optional[Holiday]) -> DailyWageRecord:
        raise NotImplementedError

    @abstractmethod
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
        raise NotImplementedError
