from __future__ import annotations

import pytest

from fakes import FakeTaskRepo
from taskora.core.enums import Role, TaskPriority, TaskStatus
from taskora.core.exceptions import AuthorizationError, ServiceError, ValidationError
from taskora.tasks.service import TaskBoard, TaskService


@pytest.fixture()
def repo():
    return FakeTaskRepo()


@pytest.fixture()
def service(repo):
    return TaskService(repo)


def test_create_task_defaults(service, repo):
    task_id = service.create_task(created_by="u1", title="  Write report ", description="")
    task = repo.get(task_id)
    assert task.title == "Write report"
    assert task.description is None
    assert task.priority is TaskPriority.MEDIUM
    assert task.status is TaskStatus.TODO


def test_create_task_validates(service):
    with pytest.raises(ValidationError):
        service.create_task(created_by="u1", title=" ")
    with pytest.raises(ValidationError):
        service.create_task(created_by="u1", title="x", priority="urgent")


def test_only_creator_deletes(service):
    task_id = service.create_task(created_by="u1", title="Mine")
    with pytest.raises(AuthorizationError):
        service.delete_task(current_user_id="u2", task_id=task_id)
    service.delete_task(current_user_id="u1", task_id=task_id)
    assert service.list_tasks() == []


def test_board_move_is_persisted(service, repo):
    task_id = service.create_task(created_by="u1", title="Ship")
    board = TaskBoard.load(service)

    moved = board.move(task_id, "in_progress")

    assert moved.status is TaskStatus.IN_PROGRESS
    assert repo.get(task_id).status is TaskStatus.IN_PROGRESS
    columns = {c["status"]: c["tasks"] for c in board.columns()}
    assert [t.task_id for t in columns["in_progress"]] == [task_id]


def test_failed_move_reloads_authoritative_state(service, repo):
    task_id = service.create_task(created_by="u1", title="Ship")
    board = TaskBoard.load(service)
    repo.fail_updates = True

    with pytest.raises(ServiceError, match="refreshed"):
        board.move(task_id, "done")

    assert [t.status for t in board.tasks] == [TaskStatus.TODO]


def test_unknown_status_leaves_board_untouched(service):
    task_id = service.create_task(created_by="u1", title="Ship")
    board = TaskBoard.load(service)
    with pytest.raises(ValidationError):
        board.move(task_id, "blocked")
    assert board.tasks[0].status is TaskStatus.TODO


def test_status_api(client, make_user, login, repos):
    uid = make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    task_id = repos.tasks.create(
        title="Ship", description=None, priority=TaskPriority.HIGH, due_date=None, created_by=uid
    )

    ok = client.post(f"/api/tasks/{task_id}/status", json={"status": "done"})
    assert ok.get_json()["task"]["status"] == "done"

    repos.tasks.fail_updates = True
    failed = client.post(f"/api/tasks/{task_id}/status", json={"status": "todo"})
    assert failed.status_code == 502
    assert failed.get_json()["tasks"][0]["status"] == "done"


def test_status_api_requires_session(client):
    assert client.post("/api/tasks/1/status", json={"status": "done"}).status_code == 401


def test_move_into_same_column_skips_the_store(service, repo):
    task_id = service.create_task(created_by="u1", title="Ship")
    board = TaskBoard.load(service)

    unchanged = board.move(task_id, "todo")

    assert unchanged.status is TaskStatus.TODO
    assert repo.update_calls == 0
    assert [t.status for t in board.tasks] == [TaskStatus.TODO]


def test_same_column_drop_via_api_succeeds(client, make_user, login, repos):
    uid = make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    task_id = repos.tasks.create(
        title="Ship", description=None, priority=TaskPriority.LOW, due_date=None, created_by=uid
    )

    resp = client.post(f"/api/tasks/{task_id}/status", json={"status": "todo"})

    assert resp.status_code == 200
    assert resp.get_json()["task"]["status"] == "todo"
