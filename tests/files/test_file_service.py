from __future__ import annotations

import os
from io import BytesIO

import pytest

from fakes import FakeFileRepo
from taskora.core.enums import Role
from taskora.core.exceptions import AuthorizationError, ServiceError, ValidationError
from taskora.files.service import FileService
from taskora.files.storage import LocalObjectStorage


@pytest.fixture()
def repo():
    return FakeFileRepo()


@pytest.fixture()
def storage(tmp_path):
    return LocalObjectStorage(str(tmp_path), "k3y")


@pytest.fixture()
def service(repo, storage):
    return FileService(repo, storage, max_upload_bytes=10)


def _stored_files(root):
    return [os.path.join(d, f) for d, _, files in os.walk(root) for f in files]


def test_upload_stores_object_and_metadata(service, repo, storage):
    file_id = service.upload(owner_id="u1", filename="a b.txt", data=b"hello", mime_type="text/plain", subject=" HR ")
    record = repo.get(file_id)

    assert record.name == "a b.txt"
    assert record.subject == "HR"
    assert record.size_bytes == 5
    assert record.storage_path.startswith("u1/")
    assert storage.download(record.storage_path) == b"hello"


def test_upload_limits(service):
    with pytest.raises(ValidationError):
        service.upload(owner_id="u1", filename="a.txt", data=b"")
    with pytest.raises(ValidationError):
        service.upload(owner_id="u1", filename="a.txt", data=b"x" * 11)


def test_failed_metadata_removes_object(service, repo, tmp_path):
    repo.fail_create = True
    with pytest.raises(ServiceError):
        service.upload(owner_id="u1", filename="a.txt", data=b"hello")
    assert _stored_files(tmp_path) == []


def test_delete_is_owner_or_super_admin(service, repo):
    file_id = service.upload(owner_id="u1", filename="a.txt", data=b"hello")
    with pytest.raises(AuthorizationError):
        service.delete(current_user_id="u2", current_role=Role.MANAGER, file_id=file_id)

    service.delete(current_user_id="admin", current_role=Role.SUPER_ADMIN, file_id=file_id)
    assert repo.get(file_id) is None


def test_open_signed_rejects_tampering(service):
    file_id = service.upload(owner_id="u1", filename="a.txt", data=b"hello")
    record = service.download(file_id)[0]
    with pytest.raises(AuthorizationError):
        service.open_signed(record.storage_path, "9999999999", "forged")


def test_search_matches_name_and_subject(service):
    service.upload(owner_id="u1", filename="budget.xlsx", data=b"1")
    service.upload(owner_id="u1", filename="notes.txt", data=b"2", subject="Budget meeting")
    service.upload(owner_id="u1", filename="other.txt", data=b"3")

    assert {r.name for r in service.list_files("budget")} == {"budget.xlsx", "notes.txt"}


def test_download_via_signed_link(client, make_user, login):
    make_user("staff@acme.io", Role.STAFF)
    login("staff@acme.io")
    client.post("/files/upload", data={"file": (BytesIO(b"report body"), "report.txt"), "subject": "Q1"})

    listing = client.get("/files").get_data(as_text=True)
    assert "report.txt" in listing

    redirect = client.get("/files/1/download")
    assert redirect.status_code == 302
    signed = redirect.headers["Location"]

    client.get("/logout")
    resp = client.get(signed)
    assert resp.status_code == 200
    assert resp.data == b"report body"

    assert client.get(signed.split("&signature=")[0] + "&signature=bad").status_code == 403
