from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceTag
from ...schedules.model import Schedule
from .base import ClockInDecision, ClockInStrategy


class NormalStrategy(ClockInStrategy):
    """On time or slightly early."""

    def decide(self, *, now: datetime, schedule: Optional[Schedule]) -> ClockInDecision:
        return ClockInDecision(allowed=True, tag=AttendanceTag.NORMAL)
