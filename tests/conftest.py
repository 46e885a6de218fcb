"""In-memory repositories and the seeded crew.

``update`` answers True whenever the row exists, changed or not, the same as the
MySQL repositories do with matched-row counts.
"""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from src.crew_board.crew_board.container import assemble_container
from src.crew_board.crew_board.core.enums import BranchCode, EmployeeRank
from src.crew_board.crew_board.employees.model import Employee, WageConfig
from src.crew_board.crew_board.employees.service import MANAGER_SESSION, SessionUser


class InMemoryEmployees:
    def __init__(self):
        self.rows: dict[str, Employee] = {}

    def get_by_id(self, employee_id):
        return self.rows.get(employee_id)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda e: e.name)

    def create(self, employee):
        self.rows[employee.employee_id] = employee
        return employee.employee_id

    def update(self, employee):
        if employee.employee_id not in self.rows:
            return False
        self.rows[employee.employee_id] = employee
        return True


class InMemorySchedules:
    def __init__(self):
        self.rows = {}

    def get_by_id(self, schedule_id):
        return self.rows.get(schedule_id)

    def get_for_employee_and_date(self, *, employee_id, work_date):
        found = [s for s in self.rows.values() if s.employee_id == employee_id and s.work_date == work_date]
        return min(found, key=lambda s: s.start_time, default=None)

    def list_range(self, *, start, end, employee_id=None):
        found = [
            s
            for s in self.rows.values()
            if start <= s.work_date <= end and (employee_id is None or s.employee_id == employee_id)
        ]
        return sorted(found, key=lambda s: (s.work_date, s.start_time))

    def create(self, schedule):
        self.rows[schedule.schedule_id] = schedule
        return schedule.schedule_id

    def update(self, schedule):
        if schedule.schedule_id not in self.rows:
            return False
        self.rows[schedule.schedule_id] = schedule
        return True

    def delete(self, schedule_id):
        return self.rows.pop(schedule_id, None) is not None


class InMemoryAttendance:
    """``fail_writes`` makes create/update raise, like a dropped DB connection."""

    def __init__(self):
        self.rows = {}
        self.fail_writes = False

    def _check(self):
        if self.fail_writes:
            raise RuntimeError("connection lost")

    def get_by_id(self, record_id):
        return self.rows.get(record_id)

    def get_for_employee_and_date(self, *, employee_id, work_date):
        found = [r for r in self.rows.values() if r.employee_id == employee_id and r.work_date == work_date]
        return max(found, key=lambda r: r.clock_in, default=None)

    def latest_for_employee(self, employee_id):
        found = [r for r in self.rows.values() if r.employee_id == employee_id]
        return max(found, key=lambda r: r.clock_in, default=None)

    def list_range(self, *, start, end, employee_id=None):
        found = [
            r
            for r in self.rows.values()
            if start <= r.work_date <= end and (employee_id is None or r.employee_id == employee_id)
        ]
        return sorted(found, key=lambda r: (r.work_date, r.clock_in), reverse=True)

    def create(self, record):
        self._check()
        self.rows[record.record_id] = record
        return record.record_id

    def update(self, record):
        self._check()
        if record.record_id not in self.rows:
            return False
        self.rows[record.record_id] = record
        return True

    def delete(self, record_id):
        return self.rows.pop(record_id, None) is not None


class InMemoryRequests:
    def __init__(self):
        self.rows = {}

    def get(self, request_id):
        return self.rows.get(request_id)

    def list(self, *, employee_id=None, substitute_id=None, status=None, request_type=None, limit=200):
        found = [
            r
            for r in self.rows.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (substitute_id is None or r.substitute_id == substitute_id)
            and (status is None or r.status == status)
            and (request_type is None or r.request_type == request_type)
        ]
        found.sort(key=lambda r: r.request_date, reverse=True)
        return found[:limit]

    def create(self, request):
        self.rows[request.request_id] = request
        return request.request_id

    def update(self, request):
        if request.request_id not in self.rows:
            return False
        self.rows[request.request_id] = request
        return True

    def delete(self, request_id):
        return self.rows.pop(request_id, None) is not None


class InMemoryHolidays:
    def __init__(self):
        self.rows = []

    def list_all(self):
        return list(self.rows)

    def create(self, holiday):
        self.rows.append(holiday)
        return holiday.holiday_id


def make_employee(employee_id, name, phone, pin, branch=BranchCode.GDXC, rank=EmployeeRank.CREW, **kwargs):
    return Employee(
        employee_id=employee_id,
        name=name,
        phone=phone,
        pin=pin,
        branch=branch,
        rank=rank,
        wage=kwargs.pop("wage", WageConfig(basic=10000)),
        join_date=kwargs.pop("join_date", date(2024, 1, 1)),
        **kwargs,
    )


@pytest.fixture
def repos():
    r = SimpleNamespace(
        employees=InMemoryEmployees(),
        schedules=InMemorySchedules(),
        attendance=InMemoryAttendance(),
        requests=InMemoryRequests(),
        holidays=InMemoryHolidays(),
    )
    for e in (
        make_employee("emp-leader", "Kim Jisu", "010-1111-2222", "AB12", rank=EmployeeRank.LEADER),
        make_employee("emp-crew", "Lee Dohyun", "010-3333-4444", "1234"),
        make_employee("emp-other", "Park Minji", "010-5555-6666", "5678", branch=BranchCode.SWXC),
        make_employee("emp-gone", "Choi Yuna", "010-7777-8888", "0000", is_resigned=True),
    ):
        r.employees.create(e)
    return r


@pytest.fixture
def container(repos):
    return assemble_container(
        employees=repos.employees,
        schedules=repos.schedules,
        attendance=repos.attendance,
        requests=repos.requests,
        holidays=repos.holidays,
        manager_password="secret",
    )


@pytest.fixture
def manager():
    return MANAGER_SESSION


@pytest.fixture
def leader(repos):
    return SessionUser.for_employee(repos.employees.get_by_id("emp-leader"))


@pytest.fixture
def crew(repos):
    return SessionUser.for_employee(repos.employees.get_by_id("emp-crew"))


@pytest.fixture
def other_branch_crew(repos):
    return SessionUser.for_employee(repos.employees.get_by_id("emp-other"))

