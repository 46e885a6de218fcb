from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import elapsed_minutes
from ..core.enums import AttendanceStatus, AttendanceTag


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one worked interval.

    While ``clock_out`` is unset the shift is open and ``accumulated_minutes`` stays 0.
    """

    record_id: str
    employee_id: str
    work_date: date
    clock_in: datetime
    clock_out: Optional[datetime] = None
    accumulated_minutes: int = 0
    status: AttendanceStatus = AttendanceStatus.WORKING
    tag: Optional[AttendanceTag] = None

    @property
    def is_open(self) -> bool:
        return self.status == AttendanceStatus.WORKING and self.clock_out is None

    def closed_at(self, clock_out: datetime) -> "AttendanceRecord":
        return replace(
            self,
            clock_out=clock_out,
            accumulated_minutes=elapsed_minutes(self.clock_in, clock_out),
            status=AttendanceStatus.OFF_WORK,
        )


@dataclass(frozen=True)
class AttendancePatch:
    """Partial update; ``reopen`` clears the clock-out and puts the record back to WORKING."""

    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    tag: Optional[AttendanceTag] = None
    reopen: bool = False

    def apply(self, record: AttendanceRecord) -> AttendanceRecord:
        clock_in = self.clock_in or record.clock_in
        if self.reopen:
            return replace(
                record,
                clock_in=clock_in,
                clock_out=None,
                accumulated_minutes=0,
                status=AttendanceStatus.WORKING,
                tag=self.tag or record.tag,
            )

        clock_out = self.clock_out or record.clock_out
        minutes = elapsed_minutes(clock_in, clock_out) if clock_out else 0
        return replace(
            record,
            clock_in=clock_in,
            clock_out=clock_out,
            accumulated_minutes=minutes,
            status=self.status or record.status,
            tag=self.tag or record.tag,
        )
