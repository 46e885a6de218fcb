from datetime import date, datetime, time

import pytest

from src.crew_board.crew_board.attendance.factory import ClockInStrategyFactory
from src.crew_board.crew_board.attendance.strategies.late_strategy import LateStrategy
from src.crew_board.crew_board.attendance.strategies.normal_strategy import NormalStrategy
from src.crew_board.crew_board.attendance.strategies.request_required_strategy import RequestRequiredStrategy
from src.crew_board.crew_board.core.enums import AttendanceTag, ClockInBlockReason
from src.crew_board.crew_board.schedules.model import Schedule

SHIFT = Schedule(
    schedule_id="sch-1",
    employee_id="emp-crew",
    work_date=date(2024, 5, 2),
    start_time=time(9, 0),
    end_time=time(18, 0),
)


def _decide(now):
    strategy = ClockInStrategyFactory().for_clock_in(now=now, schedule=SHIFT)
    return strategy, strategy.decide(now=now, schedule=SHIFT)


def test_twenty_minutes_early_is_blocked():
    strategy, decision = _decide(datetime(2024, 5, 2, 8, 40))

    assert isinstance(strategy, RequestRequiredStrategy)
    assert decision.allowed is False
    assert decision.block_reason == ClockInBlockReason.EARLY


@pytest.mark.parametrize("now", [datetime(2024, 5, 2, 8, 45), datetime(2024, 5, 2, 8, 50), datetime(2024, 5, 2, 9, 0)])
def test_inside_early_window_is_normal(now):
    strategy, decision = _decide(now)

    assert isinstance(strategy, NormalStrategy)
    assert decision.allowed is True
    assert decision.tag == AttendanceTag.NORMAL
    assert decision.requires_confirmation is False


@pytest.mark.parametrize("now", [datetime(2024, 5, 2, 9, 10), datetime(2024, 5, 2, 9, 15)])
def test_up_to_fifteen_late_needs_confirmation(now):
    strategy, decision = _decide(now)

    assert isinstance(strategy, LateStrategy)
    assert decision.allowed is True
    assert decision.tag == AttendanceTag.LATE
    assert decision.requires_confirmation is True


def test_twenty_minutes_late_is_blocked():
    _, decision = _decide(datetime(2024, 5, 2, 9, 20))

    assert decision.allowed is False
    assert decision.block_reason == ClockInBlockReason.LATE_OVER_15


def test_seconds_past_the_late_window_are_blocked():
    _, decision = _decide(datetime(2024, 5, 2, 9, 15, 1))

    assert decision.block_reason == ClockInBlockReason.LATE_OVER_15


def test_no_schedule_is_blocked():
    now = datetime(2024, 5, 2, 9, 0)
    strategy = ClockInStrategyFactory().for_clock_in(now=now, schedule=None)
    decision = strategy.decide(now=now, schedule=None)

    assert decision.allowed is False
    assert decision.block_reason == ClockInBlockReason.NO_SCHEDULE
