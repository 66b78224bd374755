from __future__ import annotations

from datetime import date, datetime

from taskora.attendance.model import DayState
from taskora.core.enums import AttendanceStatus, Role, TaskPriority


def _task(repos, owner, title="t"):
    return repos.tasks.create(title=title, description=None, priority=TaskPriority.LOW, due_date=None, created_by=owner)


def test_admin_overview_counts(container, make_user, repos):
    make_user("a@acme.io", Role.SUPER_ADMIN)
    staff = make_user("s@acme.io", Role.STAFF)
    make_user("m@acme.io", Role.MANAGER)
    repos.attendance.upsert_checkin(
        user_id=staff, work_date=date(2026, 3, 2), check_in_time=datetime(2026, 3, 2, 8), status=AttendanceStatus.PRESENT
    )

    overview = container.dashboard_service.admin_overview()

    assert len(overview.members) == 3
    assert overview.role_counts["staff"] == 1
    assert overview.active_today == 1


def test_manager_overview_only_counts_own_team(container, make_user, repos):
    boss = make_user("m@acme.io", Role.MANAGER)
    mine = make_user("s1@acme.io", Role.STAFF, manager_id=boss)
    other = make_user("s2@acme.io", Role.STAFF)
    _task(repos, mine)
    _task(repos, other)

    overview = container.dashboard_service.manager_overview(boss)

    assert [m.user_id for m in overview.team] == [mine]
    assert overview.pending_tasks == 1


def test_staff_overview(container, make_user, repos):
    uid = make_user("s@acme.io", Role.STAFF)
    _task(repos, uid)
    _task(repos, uid)
    container.file_service.upload(owner_id=uid, filename="a.txt", data=b"x")

    overview = container.dashboard_service.staff_overview(uid)

    assert overview.state is DayState.NO_RECORD
    assert overview.my_tasks == 2
    assert overview.files_uploaded == 1
