from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import ClockInBlockReason
from ...schedules.model import Schedule
from .base import ClockInDecision, ClockInStrategy


class RequestRequiredStrategy(ClockInStrategy):
    """Direct clock-in blocked; a CLOCK_IN request has to be filed instead."""

    def __init__(self, reason: ClockInBlockReason):
        self.reason = reason

    def decide(self, *, now: datetime, schedule: Optional[Schedule]) -> ClockInDecision:
        return ClockInDecision(allowed=False, block_reason=self.reason)
