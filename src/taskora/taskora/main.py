from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, render_template

from config import get_settings_module

from .admin.controller import register as register_admin
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .chat.controller import register as register_chat
from .common.logging import setup_logging
from .container import AppSettings, Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .files.controller import register as register_files
from .notifications.controller import register as register_notifications
from .settings.controller import register as register_settings
from .tasks.controller import register as register_tasks
from .users.controller import register as register_users
from .whiteboard.controller import register as register_whiteboard

REPO_ROOT = Path(__file__).resolve().parents[3]

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", "") or None)

    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"), static_folder=str(REPO_ROOT / "static"))
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_BYTES", 20 * 1024 * 1024)) + 64 * 1024
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", 7)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(db_config=db_config, settings=AppSettings.from_module(settings))

    app.extensions["taskora"] = container

    register_auth(app, container)
    register_dashboard(app, container)
    register_users(app, container)
    register_admin(app, container)
    register_attendance(app, container)
    register_tasks(app, container)
    register_files(app, container)
    register_notifications(app, container)
    register_whiteboard(app, container)
    register_chat(app, container)
    register_settings(app, container)

    @app.errorhandler(404)
    def not_found(_e):
        return render_template("404.html"), 404

    return app
