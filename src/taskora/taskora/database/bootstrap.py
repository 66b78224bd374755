from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "taskora")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql_file(db_config: dict, path: str | Path) -> None:
    target = _as_target(db_config)
    sql = _strip_create_db_and_use(_strip_comments(Path(path).read_text(encoding="utf-8")))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _exec_sql_file(db_config, schema_path)
    logger.info("schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _exec_sql_file(db_config, seed_path)


DEMO_USERS = (
    # email, password, full name, role, reports-to email
    ("admin@taskora.local", "admin12345", "Admin Demo", "super_admin", None),
    ("manager@taskora.local", "manager12345", "Sarah Johnson", "manager", None),
    ("staff@taskora.local", "staff12345", "Mike Chen", "staff", "manager@taskora.local"),
)


def ensure_demo_users(db_config: dict, *, company_name: str = "Taskora Demo") -> None:
    """Create (or reset the passwords of) the demo accounts.

    The super admin row is skipped when another super admin already exists.
    """
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)
        ids: dict[str, str] = {}

        for email, password, full_name, role, manager_email in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM accounts WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                user_id = existing["user_id"]
                cur.execute("UPDATE accounts SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
            else:
                if role == "super_admin":
                    cur.execute("SELECT 1 AS x FROM user_roles WHERE role='super_admin'")
                    if cur.fetchone():
                        logger.info("super admin already exists; skipping %s", email)
                        continue
                user_id = str(uuid.uuid4())
                cur.execute(
                    "INSERT INTO accounts(user_id, email, password_hash) VALUES(%s,%s,%s)",
                    (user_id, email, password_hash),
                )
                cur.execute(
                    """
                    INSERT INTO profiles(user_id, full_name, email, company_name, manager_id, is_active)
                    VALUES(%s,%s,%s,%s,%s,1)
                    """,
                    (user_id, full_name, email, company_name, ids.get(manager_email or "")),
                )
                cur.execute("INSERT INTO user_roles(user_id, role) VALUES(%s,%s)", (user_id, role))
            ids[email] = user_id

        staff_id = ids.get("staff@taskora.local")
        if staff_id:
            cur.execute("SELECT COUNT(*) AS n FROM notifications WHERE recipient_id=%s", (staff_id,))
            if int(cur.fetchone()["n"]) == 0:
                cur.execute(
                    """
                    INSERT INTO notifications(recipient_id, category, title, description)
                    VALUES(%s,'user','Welcome to Taskora','Your account is ready. Check in from the Attendance page.')
                    """,
                    (staff_id,),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
