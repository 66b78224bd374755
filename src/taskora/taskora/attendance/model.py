from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from ..core.enums import AttendanceStatus


class DayState(str, Enum):
    NO_RECORD = "no_record"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


@dataclass(frozen=True)
class AttendanceRecord:
    """One row per (user, work_date).

    ``status`` is decided at check-in and never recomputed. A leave row has
    neither timestamp.
    """

    attendance_id: int
    user_id: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus


@dataclass(frozen=True)
class DailySummary:
    work_date: date
    total: int
    present: int
    late: int
    absent: int
    leave: int


@dataclass(frozen=True)
class AttendanceSheetRow:
    """Read-model for the daily sheet and the CSV export."""

    user_id: str
    full_name: str
    email: str
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    worked: str
