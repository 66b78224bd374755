from __future__ import annotations

from taskora.core.enums import Role


def test_landing_page_for_visitors(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"Create workspace" in resp.data


def test_protected_page_redirects_to_login(client):
    resp = client.get("/tasks")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")


def test_login_sends_each_role_to_its_dashboard(client, make_user, login):
    make_user("admin@acme.io", Role.SUPER_ADMIN)
    make_user("boss@acme.io", Role.MANAGER)
    make_user("staff@acme.io", Role.STAFF)

    for email, target in (
        ("admin@acme.io", "/admin"),
        ("boss@acme.io", "/manager"),
        ("staff@acme.io", "/staff-dashboard"),
    ):
        resp = login(email)
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith(target)
        client.get("/logout")


def test_wrong_password_shows_error(client, make_user, login):
    make_user("staff@acme.io", Role.STAFF)
    resp = login("staff@acme.io", "wrong-password")
    assert resp.status_code == 200
    assert b"Invalid login credentials" in resp.data


def test_staff_cannot_open_admin_dashboard(client, make_user, login):
    make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")

    resp = client.get("/admin")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/staff-dashboard")


def test_user_without_role_sees_forbidden_page(client, make_user, login):
    make_user("norole@acme.io", None)
    login("norole@acme.io")

    assert client.get("/tasks").headers["Location"].endswith("/staff-dashboard")
    resp = client.get("/staff-dashboard")
    assert resp.status_code == 403
    assert b"Access denied" in resp.data


def test_signup_creates_super_admin_and_then_closes(client, repos):
    resp = client.post(
        "/signup",
        data={
            "email": "owner@acme.io",
            "password": "password-123",
            "full_name": "Olive Owner",
            "company_name": "Acme",
        },
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin")
    assert repos.roles.super_admin_exists()

    client.get("/logout")
    resp = client.get("/signup")
    assert b"signup-closed" in resp.data

    resp = client.post(
        "/signup",
        data={"email": "late@acme.io", "password": "password-123", "full_name": "Late", "company_name": "Acme"},
    )
    assert b"signup-closed" in resp.data
    assert repos.identity.get_account_by_email("late@acme.io") is None


def test_logout_revokes_session(client, make_user, login, repos):
    make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    assert repos.identity.sessions

    client.get("/logout")

    assert repos.identity.sessions == {}
    assert client.get("/tasks").status_code == 302


def test_sidebar_lists_role_menu(client, make_user, login):
    make_user("boss@acme.io", Role.MANAGER, full_name="Mia Manager")
    login("boss@acme.io")

    html = client.get("/manager").get_data(as_text=True)

    assert 'href="/staff"' in html
    assert 'href="/admin"' not in html
    assert "Mia Manager" in html


def test_unknown_page_renders_404(client):
    assert client.get("/nowhere").status_code == 404


def test_identity_outage_keeps_the_session_cookie(client, make_user, login, repos):
    make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    repos.identity.fail_lookups = True

    during = client.get("/tasks")
    assert during.status_code == 503
    assert b"session-unavailable" in during.data
    assert client.post("/api/tasks/1/status", json={"status": "done"}).status_code == 503

    repos.identity.fail_lookups = False
    after = client.get("/tasks")
    assert after.status_code == 200
