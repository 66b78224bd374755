from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional

from ..common.datetime_utils import now_local, week_start
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.roles import MANAGEMENT
from ..users.repository import ProfileRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceSheetRow, DailySummary, DayState
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.LATE: "Late",
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.LEAVE: "On Leave",
}

STATUS_CSS = {
    AttendanceStatus.PRESENT: "bg-success",
    AttendanceStatus.LATE: "bg-warning text-dark",
    AttendanceStatus.ABSENT: "bg-danger",
    AttendanceStatus.LEAVE: "bg-info text-dark",
}

MAX_EXPORT_DAYS = 366


def day_state(record: Optional[AttendanceRecord]) -> DayState:
    if record is None or record.check_in_time is None:
        return DayState.NO_RECORD
    if record.check_out_time is None:
        return DayState.CHECKED_IN
    return DayState.CHECKED_OUT


def format_worked_time(check_in: Optional[datetime], check_out: Optional[datetime]) -> str:
    """Elapsed time as ``"{h}h {mm}m"``, floored to whole minutes."""
    if check_in is None:
        return "-"
    if check_out is None:
        return "In progress"
    minutes = max(int((check_out - check_in).total_seconds() // 60), 0)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes:02d}m"


def _fmt_time(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "-"


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    def today_record(self, user_id: str, *, today: date | None = None) -> Optional[AttendanceRecord]:
        today = today or self._clock().date()
        return self._attendance.get_for_user_and_date(user_id, today)

    def check_in(self, user_id: str, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        existing = self._attendance.get_for_user_and_date(user_id, today)
        if existing and existing.check_in_time is not None:
            # first check-in of the day wins
            return existing

        decision = self._factory.for_checkin(now=now).decide_checkin(now=now)
        record = self._attendance.upsert_checkin(
            user_id=user_id,
            work_date=today,
            check_in_time=now,
            status=decision.status,
        )
        logger.info("check-in %s %s (%s)", user_id, today, record.status.value)
        return record

    def check_out(self, user_id: str, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        state = day_state(record)
        if state is DayState.NO_RECORD:
            raise ValidationError("You have not checked in today")
        if state is DayState.CHECKED_OUT:
            raise ValidationError("You have already checked out today")

        if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out_time=now):
            # another tab got there first
            raise ValidationError("You have already checked out today")
        logger.info("check-out %s %s", user_id, today)
        return self._attendance.get_for_user_and_date(user_id, today)

    def mark_leave(self, *, current_role: Optional[Role], user_id: str, work_date: date) -> None:
        if current_role not in MANAGEMENT:
            raise AuthorizationError("Only managers can record leave")
        if not self._profiles.get(user_id):
            raise ValidationError("Staff member not found")

        existing = self._attendance.get_for_user_and_date(user_id, work_date)
        if existing and existing.check_in_time is not None:
            raise ValidationError("This person already checked in that day")
        self._attendance.upsert_leave(user_id=user_id, work_date=work_date)

    def daily_summary(self, work_date: date) -> DailySummary:
        total = len(self._profiles.list_all())
        records = self._attendance.list_for_date(work_date)
        counts = {s: 0 for s in AttendanceStatus}
        for r in records:
            counts[r.status] += 1
        # anyone without a row counts as absent; this is derived, not recorded
        missing = max(total - len(records), 0)
        return DailySummary(
            work_date=work_date,
            total=total,
            present=counts[AttendanceStatus.PRESENT],
            late=counts[AttendanceStatus.LATE],
            absent=missing + counts[AttendanceStatus.ABSENT],
            leave=counts[AttendanceStatus.LEAVE],
        )

    def weekly_overview(self, day: date) -> List[DailySummary]:
        monday = week_start(day)
        return [self.daily_summary(monday + timedelta(days=i)) for i in range(5)]

    def daily_sheet(self, work_date: date) -> List[AttendanceSheetRow]:
        by_user: Dict[str, AttendanceRecord] = {r.user_id: r for r in self._attendance.list_for_date(work_date)}
        rows = []
        for p in self._profiles.list_all():
            r = by_user.get(p.user_id)
            rows.append(
                AttendanceSheetRow(
                    user_id=p.user_id,
                    full_name=p.full_name,
                    email=p.email,
                    work_date=work_date,
                    status=r.status if r else AttendanceStatus.ABSENT,
                    check_in_time=r.check_in_time if r else None,
                    check_out_time=r.check_out_time if r else None,
                    worked=format_worked_time(r.check_in_time if r else None, r.check_out_time if r else None),
                )
            )
        return rows

    def history(self, user_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> List[dict]:
        return [self._to_ui(r) for r in self._attendance.get_recent_for_user(user_id, limit)]

    def _to_ui(self, r: AttendanceRecord) -> dict:
        return {
            "date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": _fmt_time(r.check_in_time),
            "check_out": _fmt_time(r.check_out_time),
            "worked": format_worked_time(r.check_in_time, r.check_out_time),
            "status": STATUS_LABELS.get(r.status, r.status.value),
            "css_class": STATUS_CSS.get(r.status, "bg-secondary"),
        }

    def export_rows(self, *, start_date: date, end_date: date) -> List[dict]:
        """Rows for the CSV report; principals without a record are listed as absent."""
        if end_date < start_date:
            raise ValidationError("End date must not be before start date")
        if (end_date - start_date).days >= MAX_EXPORT_DAYS:
            raise ValidationError("Export range is limited to one year")

        profiles = list(self._profiles.list_all())
        records = {(r.user_id, r.work_date): r for r in self._attendance.list_between(start_date, end_date)}

        out = []
        day = start_date
        while day <= end_date:
            for p in profiles:
                r = records.get((p.user_id, day))
                check_in = r.check_in_time if r else None
                check_out = r.check_out_time if r else None
                out.append(
                    {
                        "work_date": day.isoformat(),
                        "user_id": p.user_id,
                        "full_name": p.full_name,
                        "email": p.email,
                        "check_in": _fmt_time(check_in),
                        "check_out": _fmt_time(check_out),
                        "status": (r.status if r else AttendanceStatus.ABSENT).value,
                        "worked": format_worked_time(check_in, check_out),
                    }
                )
            day += timedelta(days=1)
        return out
