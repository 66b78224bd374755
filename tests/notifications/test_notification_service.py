from __future__ import annotations

import pytest

from fakes import FakeNotificationRepo
from taskora.core.enums import NotificationCategory, Role
from taskora.core.exceptions import ValidationError
from taskora.notifications.service import NotificationService


@pytest.fixture()
def repo():
    return FakeNotificationRepo()


@pytest.fixture()
def service(repo):
    return NotificationService(repo)


def test_unread_count_and_mark_all(service):
    service.notify("u1", NotificationCategory.TASK, "Task assigned")
    service.notify("u1", NotificationCategory.FILE, "File shared")
    service.notify("u2", NotificationCategory.USER, "Welcome")

    assert service.unread_count("u1") == 2
    assert service.mark_all_read("u1") == 2
    assert service.unread_count("u1") == 0
    assert service.unread_count("u2") == 1


def test_users_cannot_touch_other_peoples_notifications(service):
    other = service.notify("u2", NotificationCategory.MESSAGE, "Private")

    with pytest.raises(ValidationError):
        service.mark_read("u1", other)
    with pytest.raises(ValidationError):
        service.delete("u1", other)
    assert service.unread_count("u2") == 1


def test_notify_is_best_effort(service, repo):
    repo.fail_create = True
    assert service.notify("u1", NotificationCategory.TASK, "Lost") is None


def test_notifications_page_tabs(client, make_user, login, container):
    uid = make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    first = container.notification_service.notify(uid, NotificationCategory.TASK, "Read me")
    container.notification_service.notify(uid, NotificationCategory.FILE, "Still new")

    client.post(f"/notifications/{first}/read")
    html = client.get("/notifications?tab=unread").get_data(as_text=True)

    assert "Still new" in html
    assert "Read me" not in html
