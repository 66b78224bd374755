from datetime import datetime

import pytest

from taskora.attendance.factory import AttendanceStrategyFactory
from taskora.attendance.strategies.late_strategy import LateStrategy
from taskora.attendance.strategies.normal_strategy import NormalStrategy
from taskora.core.enums import AttendanceStatus


@pytest.mark.parametrize("hour", range(24))
def test_late_exactly_from_ten_o_clock(hour):
    now = datetime(2026, 3, 2, hour, 30)
    decision = AttendanceStrategyFactory().for_checkin(now=now).decide_checkin(now=now)

    expected = AttendanceStatus.LATE if hour >= 10 else AttendanceStatus.PRESENT
    assert decision.status is expected


def test_minutes_do_not_matter():
    factory = AttendanceStrategyFactory()
    assert isinstance(factory.for_checkin(now=datetime(2026, 3, 2, 9, 59, 59)), NormalStrategy)
    assert isinstance(factory.for_checkin(now=datetime(2026, 3, 2, 10, 0, 0)), LateStrategy)


def test_threshold_is_configurable():
    factory = AttendanceStrategyFactory(late_threshold_hour=9)
    assert isinstance(factory.for_checkin(now=datetime(2026, 3, 2, 9, 0)), LateStrategy)
