from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Holiday:
    """Hours worked on ``holiday_date`` earn ``extra_hourly_pay`` on top of the wage."""

    holiday_id: str
    holiday_date: date
    name: str
    extra_hourly_pay: int
