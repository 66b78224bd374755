from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_checkin(
        self,
        *,
        user_id: str,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Insert-or-update keyed on (user_id, work_date).

        An existing check-in time is kept; the returned row is what the
        store holds afterwards.
        """

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        """Set check-out only on a checked-in, not yet checked-out row."""

        raise NotImplementedError

    def upsert_leave(self, *, user_id: str, work_date: date) -> None:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_between(self, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
