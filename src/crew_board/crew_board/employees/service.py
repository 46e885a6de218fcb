from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..common.validators import require_exact_length, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_WAGE, MANAGER_ACCOUNT_ID, PHONE_SUFFIX_LENGTH, PIN_LENGTH
from ..core.enums import BranchCode, EmployeeRank, UserRole
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Employee, EmployeePatch, WageConfig
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    name: str
    role: UserRole
    branch: Optional[BranchCode] = None
    rank: Optional[EmployeeRank] = None

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER

    @property
    def is_leader(self) -> bool:
        return self.role == UserRole.CREW and self.rank == EmployeeRank.LEADER

    def can_manage_branch(self, branch: BranchCode) -> bool:
        """Managers manage every branch; leaders only their own."""
        return self.is_manager or (self.is_leader and self.branch == branch)

    def to_session(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "branch": self.branch.value if self.branch else None,
            "rank": self.rank.value if self.rank else None,
        }

    @classmethod
    def from_session(cls, data) -> "SessionUser":
        return cls(
            user_id=str(data["user_id"]),
            name=data.get("name") or "",
            role=UserRole(data["role"]),
            branch=BranchCode(data["branch"]) if data.get("branch") else None,
            rank=EmployeeRank(data["rank"]) if data.get("rank") else None,
        )

    @classmethod
    def for_employee(cls, employee: Employee) -> "SessionUser":
        return cls(
            user_id=employee.employee_id,
            name=employee.name,
            role=UserRole.CREW,
            branch=employee.branch,
            rank=employee.rank,
        )


MANAGER_SESSION = SessionUser(user_id=MANAGER_ACCOUNT_ID, name="Manager", role=UserRole.MANAGER)


class AuthService:
    """Use case: crew login (phone suffix + PIN) and manager login (shared password)."""

    def __init__(self, employees: EmployeeRepository, *, manager_password: str):
        self._employees = employees
        self._manager_password_hash = generate_password_hash(manager_password)

    def login_crew(self, phone_suffix: str, pin: str) -> SessionUser:
        phone_suffix = (phone_suffix or "").strip()
        pin = (pin or "").strip().upper()

        if len(phone_suffix) != PHONE_SUFFIX_LENGTH or not phone_suffix.isdigit():
            raise ValidationError(f"Enter the last {PHONE_SUFFIX_LENGTH} digits of your phone number")
        if len(pin) != PIN_LENGTH:
            raise ValidationError(f"Enter your {PIN_LENGTH}-character PIN")

        matches = [e for e in self._employees.list_all() if e.phone_suffix == phone_suffix and e.pin == pin]
        # an active account wins over a resigned one with the same suffix and PIN
        found = min(matches, key=lambda e: e.is_resigned, default=None)
        if not found:
            logger.info("crew login failed for phone suffix %s", phone_suffix)
            raise AuthenticationError("Phone number or PIN does not match")
        if found.is_resigned:
            raise AuthenticationError("This account has been resigned, contact your manager")

        return SessionUser.for_employee(found)

    def login_manager(self, password: str) -> SessionUser:
        if not password or not check_password_hash(self._manager_password_hash, password):
            raise AuthenticationError("Wrong manager password")
        return MANAGER_SESSION

    def restore_crew(self, employee_id: str) -> Optional[SessionUser]:
        """Auto-login from a remembered employee id; resigned or unknown ids are ignored."""
        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.is_resigned:
            return None
        return SessionUser.for_employee(employee)


def _normalize_pin(pin: str) -> str:
    pin = require_exact_length(pin, "PIN", PIN_LENGTH).upper()
    if not pin.isalnum():
        raise ValidationError("PIN must be letters or digits")
    return pin


def _validate_wage(wage: WageConfig) -> WageConfig:
    return WageConfig(
        basic=require_non_negative(wage.basic, "Basic wage"),
        responsibility=require_non_negative(wage.responsibility, "Responsibility pay"),
        incentive=require_non_negative(wage.incentive, "Incentive pay"),
        special=require_non_negative(wage.special, "Special pay"),
    )


class EmployeeService:
    """Use case: manage employees (manager), browse colleagues (leader/crew)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def create(
        self,
        *,
        actor: SessionUser,
        name: str,
        phone: str,
        pin: str,
        branch: BranchCode,
        rank: EmployeeRank = EmployeeRank.CREW,
        wage: Optional[WageConfig] = None,
        join_date: Optional[date] = None,
        bank_name: Optional[str] = None,
        account_number: Optional[str] = None,
    ) -> Employee:
        if not actor.is_manager:
            raise AuthorizationError("Only the manager can add employees")

        employee = Employee(
            employee_id=new_id("emp"),
            name=require_non_empty(name, "Name"),
            phone=require_non_empty(phone, "Phone"),
            pin=_normalize_pin(pin),
            branch=branch,
            rank=rank,
            wage=_validate_wage(wage or WageConfig(**DEFAULT_WAGE)),
            join_date=join_date or now_local().date(),
            bank_name=(bank_name or "").strip() or None,
            account_number=(account_number or "").strip() or None,
        )
        self._employees.create(employee)
        logger.info("employee %s created in %s", employee.employee_id, employee.branch.value)
        return employee

    def update(self, *, actor: SessionUser, employee_id: str, patch: EmployeePatch) -> Employee:
        if not actor.is_manager:
            raise AuthorizationError("Only the manager can edit employees")

        current = self.get(employee_id)
        if patch.name is not None:
            require_non_empty(patch.name, "Name")
        if patch.phone is not None:
            require_non_empty(patch.phone, "Phone")
        if patch.pin is not None:
            patch = EmployeePatch(**{**patch.__dict__, "pin": _normalize_pin(patch.pin)})
        if patch.wage is not None:
            _validate_wage(patch.wage)

        updated = patch.apply(current)
        if not self._employees.update(updated):
            raise ValidationError("Updating employee failed")
        return updated

    def resign(self, *, actor: SessionUser, employee_id: str) -> Employee:
        return self.update(actor=actor, employee_id=employee_id, patch=EmployeePatch(is_resigned=True))

    def restore(self, *, actor: SessionUser, employee_id: str) -> Employee:
        return self.update(actor=actor, employee_id=employee_id, patch=EmployeePatch(is_resigned=False))

    def list_view(
        self,
        *,
        actor: SessionUser,
        resigned: bool = False,
        branch: Optional[BranchCode] = None,
        search: str = "",
    ) -> Sequence[Employee]:
        """Active or resigned tab, leaders first then by name.

        Crew members only ever see their own branch.
        """

        if not actor.is_manager:
            branch = actor.branch

        term = (search or "").strip().lower()
        rows = [
            e
            for e in self._employees.list_all()
            if e.is_resigned == resigned
            and (branch is None or e.branch == branch)
            and (not term or term in e.name.lower())
        ]
        rows.sort(key=lambda e: (0 if e.is_leader else 1, e.name))
        return rows

    def active_count(self) -> int:
        return sum(1 for e in self._employees.list_all() if not e.is_resigned)
