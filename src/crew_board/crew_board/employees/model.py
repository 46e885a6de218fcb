from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from ..core.enums import BranchCode, EmployeeRank


@dataclass(frozen=True)
class WageConfig:
    """Four additive hourly-rate components, in won."""

    basic: int = 0
    responsibility: int = 0
    incentive: int = 0
    special: int = 0

    @property
    def hourly_wage(self) -> int:
        return self.basic + self.responsibility + self.incentive + self.special


@dataclass(frozen=True)
class Employee:
    """Domain entity: a crew member or leader.

    Note: Pure data object (no DB access code). Never hard-deleted, resigning only sets a flag.
    """

    employee_id: str
    name: str
    phone: str
    pin: str
    branch: BranchCode
    rank: EmployeeRank
    wage: WageConfig = field(default_factory=WageConfig)
    join_date: Optional[date] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    is_resigned: bool = False

    @property
    def phone_suffix(self) -> str:
        digits = "".join(ch for ch in self.phone if ch.isdigit())
        return digits[-4:]

    @property
    def is_leader(self) -> bool:
        return self.rank == EmployeeRank.LEADER


@dataclass(frozen=True)
class EmployeePatch:
    """Partial update for an employee. ``None`` means "leave unchanged"."""

    name: Optional[str] = None
    phone: Optional[str] = None
    pin: Optional[str] = None
    branch: Optional[BranchCode] = None
    rank: Optional[EmployeeRank] = None
    wage: Optional[WageConfig] = None
    join_date: Optional[date] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    is_resigned: Optional[bool] = None

    def apply(self, employee: Employee) -> Employee:
        changes = {k: v for k, v in self.__dict__.items() if v is not None}
        return replace(employee, **changes)
