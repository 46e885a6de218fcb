from datetime import date

import pytest

from src.crew_board.crew_board.core.constants import DEFAULT_HOLIDAY_EXTRA_PAY
from src.crew_board.crew_board.core.exceptions import AuthorizationError, ValidationError


def test_leader_adds_holiday_with_default_pay(container, leader):
    holiday = container.holiday_service.create(actor=leader, holiday_date=date(2024, 6, 6), name="Memorial Day")

    assert holiday.extra_hourly_pay == DEFAULT_HOLIDAY_EXTRA_PAY
    assert container.holiday_service.for_date(date(2024, 6, 6)) == holiday
    assert container.holiday_service.for_date(date(2024, 6, 7)) is None


def test_holiday_permissions_and_validation(container, crew, manager):
    with pytest.raises(AuthorizationError):
        container.holiday_service.create(actor=crew, holiday_date=date(2024, 6, 6), name="Memorial Day")
    with pytest.raises(ValidationError):
        container.holiday_service.create(actor=manager, holiday_date=date(2024, 6, 6), name="")
    with pytest.raises(ValidationError):
        container.holiday_service.create(
            actor=manager, holiday_date=date(2024, 6, 6), name="Memorial Day", extra_hourly_pay=-5
        )


def test_list_month_sorted(container, manager):
    svc = container.holiday_service
    svc.create(actor=manager, holiday_date=date(2024, 5, 15), name="Buddha's Birthday", extra_hourly_pay=4930)
    svc.create(actor=manager, holiday_date=date(2024, 5, 5), name="Children's Day", extra_hourly_pay=4930)
    svc.create(actor=manager, holiday_date=date(2024, 6, 6), name="Memorial Day")

    assert [h.name for h in svc.list_month("2024-05")] == ["Children's Day", "Buddha's Birthday"]
    assert len(svc.list_all()) == 3


def test_list_month_accepts_unpadded_month(container, manager):
    container.holiday_service.create(actor=manager, holiday_date=date(2024, 5, 5), name="Children's Day")

    assert [h.name for h in container.holiday_service.list_month("2024-5")] == ["Children's Day"]
