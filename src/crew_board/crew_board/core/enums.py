from __future__ import annotations

from enum import Enum


class BranchCode(str, Enum):
    """Store locations. Employees and schedules belong to exactly one branch."""

    GDXC = "GDXC"
    GDXR = "GDXR"
    NWXC = "NWXC"
    GNXC = "GNXC"
    SWXC = "SWXC"
    XYNP = "XYNP"


class EmployeeRank(str, Enum):
    CREW = "CREW"
    LEADER = "LEADER"


class UserRole(str, Enum):
    """Session role. MANAGER is the branch-unrestricted admin login."""

    MANAGER = "MANAGER"
    CREW = "CREW"


class ScheduleType(str, Enum):
    FIXED = "FIXED"
    SUBSTITUTE = "SUB"
    TRAINING = "EDU"


class AttendanceStatus(str, Enum):
    """Stored status of an attendance record."""

    WORKING = "WORKING"
    OFF_WORK = "OFF"
    BREAK = "BREAK"
    PENDING_APPROVAL = "PENDING"


class AttendanceTag(str, Enum):
    NORMAL = "NORMAL"
    LATE = "LATE"
    OUTSIDE_SCHEDULE = "OUTSIDE"


class RequestType(str, Enum):
    CORRECTION = "CORRECTION"
    LEAVE = "LEAVE"
    OVERTIME = "OVERTIME"
    EXPENSE = "EXPENSE"
    CLOCK_IN = "CLOCK_IN"
    SUBSTITUTE = "SUBSTITUTE"


class RequestStatus(str, Enum):
    """Manager-level decision on an approval request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class SubstituteStatus(str, Enum):
    """Colleague-level answer on a substitute request, prior to the manager decision."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class ClockInBlockReason(str, Enum):
    EARLY = "EARLY"
    LATE_OVER_15 = "LATE_OVER_15"
    NO_SCHEDULE = "NO_SCHEDULE"
