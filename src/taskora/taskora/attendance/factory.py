from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.constants import DEFAULT_LATE_THRESHOLD_HOUR
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    late_threshold_hour: int = DEFAULT_LATE_THRESHOLD_HOUR

    def for_checkin(self, *, now: datetime) -> AttendanceStrategy:
        # local wall-clock hour, minutes ignored: 09:59 is on time, 10:00 is late
        if now.hour >= self.late_threshold_hour:
            return LateStrategy()
        return NormalStrategy()
