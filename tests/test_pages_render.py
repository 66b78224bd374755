from __future__ import annotations

import pytest

from taskora.core.enums import Role
from taskora.core.roles import navigation_for


@pytest.mark.parametrize("role", list(Role))
def test_every_menu_page_renders_for_its_role(client, make_user, login, role):
    make_user("user@acme.io", role, full_name="Pat Page")
    login("user@acme.io")

    for entry in navigation_for(role):
        resp = client.get(entry.path)
        assert resp.status_code == 200, entry.path
        assert "Pat Page" in resp.get_data(as_text=True)


def test_settings_updates_profile_and_password(client, make_user, login, repos):
    uid = make_user("user@acme.io", Role.STAFF)
    login("user@acme.io")

    client.post("/settings/profile", data={"full_name": "Renamed", "company_name": "Acme Two"})
    assert repos.profiles.get(uid).full_name == "Renamed"

    resp = client.post(
        "/settings/password",
        data={"new_password": "another-pass-1", "confirm_password": "different-pass"},
        follow_redirects=True,
    )
    assert "Passwords do not match" in resp.get_data(as_text=True)

    client.post("/settings/password", data={"new_password": "another-pass-1", "confirm_password": "another-pass-1"})
    client.get("/logout")
    assert login("user@acme.io", "another-pass-1").status_code == 302
