from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest

from fakes import (
    FakeAttendanceRepo,
    FakeFileRepo,
    FakeIdentityRepo,
    FakeNotificationRepo,
    FakeProfileRepo,
    FakeRoleRepo,
    FakeTaskRepo,
    FakeTimer,
    FakeWhiteboardRepo,
    PASSWORD,
)
from taskora.chat.assistant import FallbackAssistant
from taskora.container import AppSettings, assemble_container
from taskora.core.enums import Role
from taskora.files.storage import LocalObjectStorage
from taskora.main import create_app
from taskora.whiteboard.autosave import AutosaveDebouncer

# Monday
FIXED_NOW = datetime(2026, 3, 2, 9, 0, 0)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock():
    return Clock(FIXED_NOW)


@pytest.fixture()
def repos():
    return SimpleNamespace(
        identity=FakeIdentityRepo(),
        profiles=FakeProfileRepo(),
        roles=FakeRoleRepo(),
        attendance=FakeAttendanceRepo(),
        tasks=FakeTaskRepo(),
        files=FakeFileRepo(),
        notifications=FakeNotificationRepo(),
        whiteboards=FakeWhiteboardRepo(),
    )


@pytest.fixture()
def timers():
    FakeTimer.created = []
    return FakeTimer.created


@pytest.fixture()
def container(repos, clock, tmp_path, timers):
    settings = AppSettings(
        secret_key="test-secret",
        session_days=1,
        autosave_delay_seconds=0.05,
        storage_dir=str(tmp_path / "storage"),
        signed_url_ttl_seconds=60,
        max_upload_bytes=1024 * 1024,
    )
    return assemble_container(
        settings=settings,
        identity_repo=repos.identity,
        profiles_repo=repos.profiles,
        roles_repo=repos.roles,
        attendance_repo=repos.attendance,
        tasks_repo=repos.tasks,
        files_repo=repos.files,
        notifications_repo=repos.notifications,
        whiteboards_repo=repos.whiteboards,
        storage=LocalObjectStorage(settings.storage_dir, settings.secret_key, default_ttl=60),
        chat_backend=FallbackAssistant(),
        autosave=AutosaveDebouncer(delay=settings.autosave_delay_seconds, timer_factory=FakeTimer),
        clock=clock,
    )


@pytest.fixture()
def make_user(container, repos):
    """Create an account with profile and role; returns its user id."""

    def _make(email: str, role: Role | None, *, full_name: str = "Test User", manager_id: str | None = None) -> str:
        principal = container.identity_service.create_account(email, PASSWORD)
        repos.profiles.create(
            user_id=principal.user_id,
            full_name=full_name,
            email=principal.email,
            company_name="Acme",
            manager_id=manager_id,
        )
        if role is not None:
            repos.roles.assign(principal.user_id, role)
        return principal.user_id

    return _make


@pytest.fixture()
def app(container):
    app = create_app("config.testing", container=container)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login(client):
    def _login(email: str, password: str = PASSWORD):
        return client.post("/login", data={"email": email, "password": password})

    return _login
