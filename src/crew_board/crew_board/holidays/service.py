from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import in_month, normalize_month
from ..common.ids import new_id
from ..common.validators import require_non_empty, require_non_negative
from ..core.constants import DEFAULT_HOLIDAY_EXTRA_PAY
from ..core.exceptions import AuthorizationError
from ..employees.service import SessionUser
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def create(
        self,
        *,
        actor: SessionUser,
        holiday_date: date,
        name: str,
        extra_hourly_pay: Optional[int] = None,
    ) -> Holiday:
        if not (actor.is_manager or actor.is_leader):
            raise AuthorizationError("Only managers and leaders can add holidays")

        pay = DEFAULT_HOLIDAY_EXTRA_PAY if extra_hourly_pay is None else extra_hourly_pay
        holiday = Holiday(
            holiday_id=new_id("hol"),
            holiday_date=holiday_date,
            name=require_non_empty(name, "Holiday name"),
            extra_hourly_pay=require_non_negative(pay, "Extra hourly pay"),
        )
        self._holidays.create(holiday)
        logger.info("holiday %s added on %s", holiday.name, holiday.holiday_date)
        return holiday

    def list_all(self) -> Sequence[Holiday]:
        return sorted(self._holidays.list_all(), key=lambda h: h.holiday_date)

    def list_month(self, month: str) -> Sequence[Holiday]:
        month = normalize_month(month)
        return [h for h in self.list_all() if in_month(h.holiday_date, month)]

    def for_date(self, day: date) -> Optional[Holiday]:
        return next((h for h in self._holidays.list_all() if h.holiday_date == day), None)
