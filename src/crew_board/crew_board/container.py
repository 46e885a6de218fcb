from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import ClockInStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .integrations.legacy_clock import LegacyClockClient
from .integrations.sheet_upload import SheetUploadClient
from .payroll.service import PayrollService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    schedules_repo: ScheduleRepository
    attendance_repo: AttendanceRepository
    requests_repo: RequestRepository
    holidays_repo: HolidayRepository

    auth_service: AuthService
    employee_service: EmployeeService
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    request_service: RequestService
    holiday_service: HolidayService
    payroll_service: PayrollService

    legacy_clock: LegacyClockClient
    sheet_upload: SheetUploadClient

    remember_cookie_days: int = 30
    conn: Optional[DatabaseConnection] = None


def assemble_container(
    *,
    employees: EmployeeRepository,
    schedules: ScheduleRepository,
    attendance: AttendanceRepository,
    requests: RequestRepository,
    holidays: HolidayRepository,
    manager_password: str,
    legacy_clock: Optional[LegacyClockClient] = None,
    sheet_upload: Optional[SheetUploadClient] = None,
    remember_cookie_days: int = 30,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any repository implementation."""

    return Container(
        employees_repo=employees,
        schedules_repo=schedules,
        attendance_repo=attendance,
        requests_repo=requests,
        holidays_repo=holidays,
        auth_service=AuthService(employees, manager_password=manager_password),
        employee_service=EmployeeService(employees),
        schedule_service=ScheduleService(schedules, employees, attendance),
        attendance_service=AttendanceService(
            attendance,
            schedules,
            requests,
            employees,
            strategy_factory=ClockInStrategyFactory(),
        ),
        request_service=RequestService(requests, attendance, schedules, employees),
        holiday_service=HolidayService(holidays),
        payroll_service=PayrollService(employees, attendance, requests, holidays),
        legacy_clock=legacy_clock or LegacyClockClient(""),
        sheet_upload=sheet_upload or SheetUploadClient(""),
        remember_cookie_days=int(remember_cookie_days),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    manager_password: str,
    legacy_clock_url: str = "",
    sheet_api_url: str = "",
    http_timeout: float = 15.0,
    remember_cookie_days: int = 30,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble_container(
        employees=MySQLEmployeeRepository(conn),
        schedules=MySQLScheduleRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        requests=MySQLRequestRepository(conn),
        holidays=MySQLHolidayRepository(conn),
        manager_password=manager_password,
        legacy_clock=LegacyClockClient(legacy_clock_url, timeout=http_timeout),
        sheet_upload=SheetUploadClient(sheet_api_url, timeout=http_timeout),
        remember_cookie_days=remember_cookie_days,
        conn=conn,
    )
