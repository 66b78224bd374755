from __future__ import annotations

from typing import Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import RoleRepository


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_role(self, user_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return row["role"] if row else None

    def assign(self, user_id: str, role: Role) -> None:
        # uq_user_roles_single_super_admin turns a second super admin into ER_DUP_ENTRY
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO user_roles(user_id, role) VALUES(%s,%s)",
                (user_id, role.value),
            )

    def super_admin_exists(self) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS x FROM user_roles WHERE role='super_admin' LIMIT 1")
            return fetchone(cur) is not None

    def list_all(self) -> Dict[str, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id, role FROM user_roles")
            return {r["user_id"]: r["role"] for r in fetchall(cur)}
