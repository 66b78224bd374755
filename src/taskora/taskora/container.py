from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from .admin.service import AdminFunctions
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.mysql_identity_repository import MySQLIdentityRepository
from .auth.repository import IdentityRepository
from .auth.service import IdentityService
from .auth.session import SessionProvider
from .chat.assistant import FallbackAssistant
from .chat.client import ChatCompletionClient
from .chat.service import ChatBackend, ChatService
from .common.datetime_utils import now_local
from .core import constants
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .files.mysql_file_repository import MySQLFileRepository
from .files.repository import FileRepository
from .files.service import FileService
from .files.storage import LocalObjectStorage
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .users.mysql_profile_repository import MySQLProfileRepository
from .users.mysql_role_repository import MySQLRoleRepository
from .users.repository import ProfileRepository, RoleRepository
from .users.service import UserService
from .whiteboard.autosave import AutosaveDebouncer
from .whiteboard.mysql_whiteboard_repository import MySQLWhiteboardRepository
from .whiteboard.repository import WhiteboardRepository
from .whiteboard.service import WhiteboardService


@dataclass(frozen=True)
class AppSettings:
    """Settings the services need, read once from the settings module."""

    secret_key: str = "dev-secret-key"
    session_days: int = constants.DEFAULT_SESSION_DAYS
    late_threshold_hour: int = constants.DEFAULT_LATE_THRESHOLD_HOUR
    autosave_delay_seconds: float = constants.DEFAULT_AUTOSAVE_DELAY_SECONDS
    storage_dir: str = "storage"
    signed_url_ttl_seconds: int = constants.DEFAULT_SIGNED_URL_TTL_SECONDS
    max_upload_bytes: int = constants.DEFAULT_MAX_UPLOAD_BYTES
    chat_api_url: str = ""
    chat_api_key: str = ""
    chat_model: str = "gpt-4o-mini"
    chat_timeout_seconds: float = 60.0

    @classmethod
    def from_module(cls, settings: Any) -> "AppSettings":
        defaults = cls()
        return cls(
            secret_key=str(getattr(settings, "SECRET_KEY", defaults.secret_key)),
            session_days=int(getattr(settings, "SESSION_DAYS", defaults.session_days)),
            late_threshold_hour=int(getattr(settings, "LATE_THRESHOLD_HOUR", defaults.late_threshold_hour)),
            autosave_delay_seconds=float(getattr(settings, "AUTOSAVE_DELAY_SECONDS", defaults.autosave_delay_seconds)),
            storage_dir=str(getattr(settings, "STORAGE_DIR", defaults.storage_dir)),
            signed_url_ttl_seconds=int(getattr(settings, "SIGNED_URL_TTL_SECONDS", defaults.signed_url_ttl_seconds)),
            max_upload_bytes=int(getattr(settings, "MAX_UPLOAD_BYTES", defaults.max_upload_bytes)),
            chat_api_url=str(getattr(settings, "CHAT_API_URL", "") or ""),
            chat_api_key=str(getattr(settings, "CHAT_API_KEY", "") or ""),
            chat_model=str(getattr(settings, "CHAT_MODEL", defaults.chat_model)),
            chat_timeout_seconds=float(getattr(settings, "CHAT_TIMEOUT_SECONDS", defaults.chat_timeout_seconds)),
        )


@dataclass(frozen=True)
class Container:
    settings: AppSettings
    clock: Callable[[], datetime]

    identity_repo: IdentityRepository
    profiles_repo: ProfileRepository
    roles_repo: RoleRepository
    attendance_repo: AttendanceRepository
    tasks_repo: TaskRepository
    files_repo: FileRepository
    notifications_repo: NotificationRepository
    whiteboards_repo: WhiteboardRepository

    identity_service: IdentityService
    user_service: UserService
    admin_functions: AdminFunctions
    attendance_service: AttendanceService
    task_service: TaskService
    file_service: FileService
    notification_service: NotificationService
    whiteboard_service: WhiteboardService
    chat_service: ChatService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = field(default=None)

    def new_session_provider(self) -> SessionProvider:
        """A fresh provider for one request."""
        return SessionProvider(self.identity_service, self.profiles_repo, self.roles_repo)


def assemble_container(
    *,
    settings: AppSettings,
    identity_repo: IdentityRepository,
    profiles_repo: ProfileRepository,
    roles_repo: RoleRepository,
    attendance_repo: AttendanceRepository,
    tasks_repo: TaskRepository,
    files_repo: FileRepository,
    notifications_repo: NotificationRepository,
    whiteboards_repo: WhiteboardRepository,
    storage: Optional[LocalObjectStorage] = None,
    chat_backend: Optional[ChatBackend] = None,
    autosave: Optional[AutosaveDebouncer] = None,
    clock: Callable[[], datetime] = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations."""
    storage = storage or LocalObjectStorage(
        settings.storage_dir,
        settings.secret_key,
        default_ttl=settings.signed_url_ttl_seconds,
    )
    if chat_backend is None:
        if settings.chat_api_url:
            chat_backend = ChatCompletionClient(
                settings.chat_api_url,
                settings.chat_api_key,
                model=settings.chat_model,
                timeout=settings.chat_timeout_seconds,
            )
        else:
            chat_backend = FallbackAssistant()

    identity_service = IdentityService(identity_repo, session_days=settings.session_days, clock=clock)
    user_service = UserService(profiles_repo, roles_repo)
    file_service = FileService(
        files_repo,
        storage,
        max_upload_bytes=settings.max_upload_bytes,
        signed_url_ttl=settings.signed_url_ttl_seconds,
    )
    notification_service = NotificationService(notifications_repo)
    admin_functions = AdminFunctions(
        identity_service,
        profiles_repo,
        roles_repo,
        files=file_service,
        notifications=notification_service,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        profiles_repo,
        strategy_factory=AttendanceStrategyFactory(late_threshold_hour=settings.late_threshold_hour),
        clock=clock,
    )
    task_service = TaskService(tasks_repo)
    whiteboard_service = WhiteboardService(
        whiteboards_repo,
        autosave or AutosaveDebouncer(delay=settings.autosave_delay_seconds),
    )
    chat_service = ChatService(chat_backend)
    dashboard_service = DashboardService(user_service, task_service, attendance_repo, files_repo, clock=clock)

    return Container(
        settings=settings,
        clock=clock,
        identity_repo=identity_repo,
        profiles_repo=profiles_repo,
        roles_repo=roles_repo,
        attendance_repo=attendance_repo,
        tasks_repo=tasks_repo,
        files_repo=files_repo,
        notifications_repo=notifications_repo,
        whiteboards_repo=whiteboards_repo,
        identity_service=identity_service,
        user_service=user_service,
        admin_functions=admin_functions,
        attendance_service=attendance_service,
        task_service=task_service,
        file_service=file_service,
        notification_service=notification_service,
        whiteboard_service=whiteboard_service,
        chat_service=chat_service,
        dashboard_service=dashboard_service,
        conn=conn,
    )


def build_container(*, db_config: dict, settings: Optional[AppSettings] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble_container(
        settings=settings or AppSettings(),
        identity_repo=MySQLIdentityRepository(conn),
        profiles_repo=MySQLProfileRepository(conn),
        roles_repo=MySQLRoleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        files_repo=MySQLFileRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        whiteboards_repo=MySQLWhiteboardRepository(conn),
        conn=conn,
    )
