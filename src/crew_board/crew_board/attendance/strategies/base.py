from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceTag, ClockInBlockReason
from ...schedules.model import Schedule


@dataclass(frozen=True)
class ClockInDecision:
    allowed: bool
    tag: Optional[AttendanceTag] = None
    requires_confirmation: bool = False
    block_reason: Optional[ClockInBlockReason] = None


class ClockInStrategy(ABC):
    """Strategy Pattern: what a direct clock-in attempt turns into."""

    @abstractmethod
    def decide(self, *, now: datetime, schedule: Optional[Schedule]) -> ClockInDecision:
        raise NotImplementedError
