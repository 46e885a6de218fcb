from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import CLOCK_IN_WINDOW_MINUTES
from ..core.enums import ClockInBlockReason
from ..schedules.model import Schedule
from .strategies.base import ClockInStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.request_required_strategy import RequestRequiredStrategy


@dataclass
class ClockInStrategyFactory:
    """Factory Pattern: pick the strategy from the distance to the scheduled start.

    Boundaries (minutes before start): > window early, [0, window] normal,
    [-window, 0) late, < -window too late.
    """

    window_minutes: int = CLOCK_IN_WINDOW_MINUTES

    def for_clock_in(self, *, now: datetime, schedule: Optional[Schedule]) -> ClockInStrategy:
        if not schedule:
            return RequestRequiredStrategy(ClockInBlockReason.NO_SCHEDULE)

        diff = (schedule.starts_at - now).total_seconds() / 60
        if diff > self.window_minutes:
            return RequestRequiredStrategy(ClockInBlockReason.EARLY)
        if diff >= 0:
            return NormalStrategy()
        if diff >= -self.window_minutes:
            return LateStrategy()
        return RequestRequiredStrategy(ClockInBlockReason.LATE_OVER_15)
