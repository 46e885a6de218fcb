from __future__ import annotations

import calendar
import math
import re
from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError

_WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_RE = re.compile(r"^\d{4}-\d{1,2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date (YYYY-MM-DD)")


def parse_iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError("Invalid timestamp (ISO 8601)")


def parse_hhmm(value: str) -> Optional[time]:
    """Parse HH:MM; empty input means "not provided"."""
    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.strptime(v, "%H:%M").time()
    except ValueError:
        raise ValidationError("Invalid time (HH:MM)")


def normalize_month(value: str) -> str:
    """Canonical YYYY-MM key; "2024-5" and " 2024-05 " both give "2024-05"."""
    v = (value or "").strip()
    if not _MONTH_RE.match(v):
        raise ValidationError("Invalid month (YYYY-MM)")
    try:
        parsed = datetime.strptime(v, "%Y-%m")
    except ValueError:
        raise ValidationError("Invalid month (YYYY-MM)")
    return f"{parsed.year:04d}-{parsed.month:02d}"


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    year, month = normalize_month(value).split("-")
    return int(year), int(month)


def month_key(d: date) -> str:
    return d.strftime("%Y-%m")


def in_month(d: date, month: str) -> bool:
    return month_key(d) == month


def month_days(year: int, month: int) -> list[date]:
    last = calendar.monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, last + 1)]


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, floored and never negative."""
    return max(0, math.floor((end - start).total_seconds() / 60))


def format_duration(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def format_elapsed(start: datetime, now: datetime) -> str:
    seconds = max(0, int((now - start).total_seconds()))
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


def weekday_label(d: date) -> str:
    return _WEEKDAY_LABELS[d.weekday()]


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
