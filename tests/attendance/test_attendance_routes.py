from __future__ import annotations

from datetime import date, datetime

from taskora.core.enums import AttendanceStatus, Role


def test_check_in_and_out_through_the_page(client, make_user, login, repos, clock):
    uid = make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")

    client.post("/attendance/check-in")
    record = repos.attendance.get_for_user_and_date(uid, date(2026, 3, 2))
    assert record.status is AttendanceStatus.PRESENT

    clock.now = datetime(2026, 3, 2, 17, 0)
    client.post("/attendance/check-out")
    html = client.get("/attendance").get_data(as_text=True)

    assert "Done for today" in html
    assert "8h 00m" in html


def test_check_out_first_is_explained(client, make_user, login):
    make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")

    resp = client.post("/attendance/check-out", follow_redirects=True)

    assert "You have not checked in today" in resp.get_data(as_text=True)


def test_staff_does_not_see_daily_sheet(client, make_user, login):
    make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    assert "Daily sheet" not in client.get("/attendance").get_data(as_text=True)


def test_manager_records_leave_and_exports_csv(client, make_user, login, repos):
    make_user("boss@acme.io", Role.MANAGER)
    staff = make_user("staff@acme.io", Role.STAFF, full_name="Sid Staff")
    login("boss@acme.io")

    client.post("/attendance/leave", data={"user_id": staff, "work_date": "2026-03-02"})
    assert repos.attendance.get_for_user_and_date(staff, date(2026, 3, 2)).status is AttendanceStatus.LEAVE

    resp = client.get("/attendance/export?start=2026-03-02&end=2026-03-02")
    assert resp.mimetype == "text/csv"
    text = resp.data.decode("utf-8-sig")
    assert text.splitlines()[0] == "work_date,user_id,full_name,email,check_in,check_out,status,worked"
    assert "Sid Staff" in text and "leave" in text


def test_staff_cannot_export(client, make_user, login):
    make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    resp = client.get("/attendance/export?start=2026-03-02&end=2026-03-02")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/staff-dashboard")
