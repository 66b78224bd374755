from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from fakes import FakeTimer, FakeWhiteboardRepo
from taskora.core.enums import Role
from taskora.core.exceptions import AuthorizationError, ValidationError
from taskora.whiteboard.autosave import AutosaveDebouncer
from taskora.whiteboard.service import PNG_DATA_URL_PREFIX, WhiteboardService, validate_snapshot


def png_data_url(color="red", size=(8, 6)) -> str:
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return PNG_DATA_URL_PREFIX + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture()
def repo():
    return FakeWhiteboardRepo()


@pytest.fixture()
def service(repo, timers):
    return WhiteboardService(repo, AutosaveDebouncer(delay=3.0, timer_factory=FakeTimer))


def test_snapshot_round_trip_is_byte_identical(service):
    board_id = service.create_board(owner_id="u1", name="Plan")
    snapshot = png_data_url()

    service.save(user_id="u1", board_id=board_id, snapshot=snapshot)

    assert service.load(user_id="u1", board_id=board_id).snapshot == snapshot


@pytest.mark.parametrize(
    "snapshot",
    [
        "",
        "data:image/jpeg;base64,AAAA",
        PNG_DATA_URL_PREFIX + "not base64!!",
        PNG_DATA_URL_PREFIX + base64.b64encode(b"plain text").decode("ascii"),
    ],
)
def test_invalid_snapshots_are_rejected(snapshot):
    with pytest.raises(ValidationError):
        validate_snapshot(snapshot)


def test_private_boards_are_hidden_until_shared(service):
    board_id = service.create_board(owner_id="u1", name="Plan")

    with pytest.raises(ValidationError, match="Whiteboard not found"):
        service.load(user_id="u2", board_id=board_id)
    assert service.list_boards("u2") == []

    assert service.toggle_shared(user_id="u1", board_id=board_id) is True
    assert service.load(user_id="u2", board_id=board_id).name == "Plan"


def test_only_owner_saves(service):
    board_id = service.create_board(owner_id="u1", name="Plan")
    service.toggle_shared(user_id="u1", board_id=board_id)
    with pytest.raises(AuthorizationError):
        service.save(user_id="u2", board_id=board_id, snapshot=png_data_url())


def test_autosave_writes_only_the_last_snapshot(service, repo, timers):
    board_id = service.create_board(owner_id="u1", name="Plan")
    red, blue = png_data_url("red"), png_data_url("blue")

    service.queue_autosave(user_id="u1", board_id=board_id, snapshot=red)
    service.queue_autosave(user_id="u1", board_id=board_id, snapshot=blue)
    for t in timers:
        t.fire()

    assert repo.saves == [(board_id, blue)]


def test_explicit_save_drops_pending_autosave(service, repo, timers):
    board_id = service.create_board(owner_id="u1", name="Plan")
    old, new = png_data_url("red"), png_data_url("green")

    service.queue_autosave(user_id="u1", board_id=board_id, snapshot=old)
    service.save(user_id="u1", board_id=board_id, snapshot=new)
    timers[0].fire()

    assert repo.saves == [(board_id, new)]


def test_flush_autosave_writes_now(service, repo):
    board_id = service.create_board(owner_id="u1", name="Plan")
    snapshot = png_data_url()
    service.queue_autosave(user_id="u1", board_id=board_id, snapshot=snapshot)

    assert service.flush_autosave(user_id="u1", board_id=board_id)
    assert repo.rows[board_id].snapshot == snapshot


def test_whiteboard_api(client, make_user, login, repos, timers):
    make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    client.post("/whiteboard/create", data={"name": "Sketch"})
    snapshot = png_data_url()

    assert client.post("/api/whiteboard/1/autosave", json={"snapshot": snapshot}).status_code == 202
    assert repos.whiteboards.saves == []
    timers[-1].fire()
    assert repos.whiteboards.saves == [(1, snapshot)]

    assert client.post("/api/whiteboard/1/save", json={"snapshot": "junk"}).status_code == 400
    assert client.get("/api/whiteboard/1").get_json()["snapshot"] == snapshot
    assert client.get("/api/whiteboard/99").status_code == 404
