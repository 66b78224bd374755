from __future__ import annotations

from datetime import date, datetime

import pytest

from fakes import FakeAttendanceRepo, FakeProfileRepo
from taskora.attendance.model import DayState
from taskora.attendance.service import AttendanceService, day_state, format_worked_time
from taskora.core.enums import AttendanceStatus, Role
from taskora.core.exceptions import AuthorizationError, ValidationError

DAY = date(2026, 3, 2)


@pytest.fixture()
def repo():
    return FakeAttendanceRepo()


@pytest.fixture()
def profiles():
    p = FakeProfileRepo()
    for uid, name in (("u1", "Ann"), ("u2", "Bob"), ("u3", "Cid"), ("u4", "Dee")):
        p.create(user_id=uid, full_name=name, email=f"{uid}@acme.io")
    return p


@pytest.fixture()
def service(repo, profiles):
    return AttendanceService(repo, profiles, clock=lambda: datetime(2026, 3, 2, 9, 0))


def test_check_in_before_ten_is_present(service):
    record = service.check_in("u1", now=datetime(2026, 3, 2, 9, 59))
    assert record.status is AttendanceStatus.PRESENT
    assert day_state(record) is DayState.CHECKED_IN


def test_check_in_at_ten_is_late(service):
    record = service.check_in("u1", now=datetime(2026, 3, 2, 10, 0))
    assert record.status is AttendanceStatus.LATE


def test_second_check_in_keeps_first(service, repo):
    first = service.check_in("u1", now=datetime(2026, 3, 2, 8, 0))
    again = service.check_in("u1", now=datetime(2026, 3, 2, 11, 0))

    assert again.check_in_time == first.check_in_time
    assert again.status is AttendanceStatus.PRESENT
    assert len(repo.rows) == 1


def test_check_out_without_check_in_is_refused(service, repo):
    with pytest.raises(ValidationError, match="not checked in"):
        service.check_out("u1", now=datetime(2026, 3, 2, 17, 0))
    assert repo.rows == {}


def test_check_out_twice_is_refused(service):
    service.check_in("u1", now=datetime(2026, 3, 2, 8, 0))
    out = service.check_out("u1", now=datetime(2026, 3, 2, 17, 0))
    assert day_state(out) is DayState.CHECKED_OUT

    with pytest.raises(ValidationError, match="already checked out"):
        service.check_out("u1", now=datetime(2026, 3, 2, 18, 0))


def test_check_in_after_leave_fills_the_row(service, repo):
    service.mark_leave(current_role=Role.MANAGER, user_id="u1", work_date=DAY)
    record = service.check_in("u1", now=datetime(2026, 3, 2, 9, 0))

    assert record.status is AttendanceStatus.PRESENT
    assert len(repo.rows) == 1


def test_only_management_records_leave(service):
    with pytest.raises(AuthorizationError):
        service.mark_leave(current_role=Role.STAFF, user_id="u1", work_date=DAY)


def test_leave_refused_after_check_in(service):
    service.check_in("u1", now=datetime(2026, 3, 2, 9, 0))
    with pytest.raises(ValidationError):
        service.mark_leave(current_role=Role.SUPER_ADMIN, user_id="u1", work_date=DAY)


@pytest.mark.parametrize(
    "check_in, check_out, expected",
    [
        (None, None, "-"),
        (datetime(2026, 3, 2, 9, 0), None, "In progress"),
        (datetime(2026, 3, 2, 9, 0), datetime(2026, 3, 2, 17, 30), "8h 30m"),
        (datetime(2026, 3, 2, 9, 0), datetime(2026, 3, 2, 9, 5, 59), "0h 05m"),
    ],
)
def test_format_worked_time(check_in, check_out, expected):
    assert format_worked_time(check_in, check_out) == expected


def test_daily_summary_counts_missing_people_as_absent(service):
    service.check_in("u1", now=datetime(2026, 3, 2, 9, 0))
    service.check_in("u2", now=datetime(2026, 3, 2, 10, 15))
    service.mark_leave(current_role=Role.MANAGER, user_id="u3", work_date=DAY)

    summary = service.daily_summary(DAY)

    assert (summary.total, summary.present, summary.late, summary.leave, summary.absent) == (4, 1, 1, 1, 1)


def test_weekly_overview_runs_monday_to_friday(service):
    week = service.weekly_overview(date(2026, 3, 4))
    assert [d.work_date for d in week] == [date(2026, 3, 2 + i) for i in range(5)]


def test_daily_sheet_lists_everyone(service):
    service.check_in("u1", now=datetime(2026, 3, 2, 9, 0))
    rows = {r.user_id: r for r in service.daily_sheet(DAY)}

    assert rows["u1"].status is AttendanceStatus.PRESENT
    assert rows["u1"].worked == "In progress"
    assert rows["u4"].status is AttendanceStatus.ABSENT


def test_history_formats_rows(service):
    service.check_in("u1", now=datetime(2026, 3, 2, 9, 0))
    service.check_out("u1", now=datetime(2026, 3, 2, 17, 45))

    [row] = service.history("u1")

    assert row["check_in"] == "09:00"
    assert row["check_out"] == "17:45"
    assert row["worked"] == "8h 45m"


def test_export_rejects_bad_ranges(service):
    with pytest.raises(ValidationError):
        service.export_rows(start_date=date(2026, 3, 5), end_date=date(2026, 3, 1))
    with pytest.raises(ValidationError):
        service.export_rows(start_date=date(2025, 1, 1), end_date=date(2026, 3, 1))


def test_export_has_one_row_per_person_and_day(service):
    service.check_in("u1", now=datetime(2026, 3, 2, 9, 0))
    rows = service.export_rows(start_date=DAY, end_date=date(2026, 3, 3))
    assert len(rows) == 8
    assert {r["status"] for r in rows if r["user_id"] == "u1" and r["work_date"] == "2026-03-02"} == {"present"}
