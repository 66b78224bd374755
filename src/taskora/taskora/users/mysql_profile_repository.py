from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = "user_id, full_name, email, company_name, manager_id, is_active, created_at"


def _to_profile(row: dict) -> Profile:
    return Profile(
        user_id=row["user_id"],
        full_name=row["full_name"],
        email=row["email"],
        company_name=row.get("company_name"),
        manager_id=row.get("manager_id"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_all(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles ORDER BY full_name")
            return [_to_profile(r) for r in fetchall(cur)]

    def list_by_manager(self, manager_id: str) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE manager_id=%s ORDER BY full_name", (manager_id,))
            return [_to_profile(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: str,
        full_name: str,
        email: str,
        company_name: Optional[str] = None,
        manager_id: Optional[str] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(user_id, full_name, email, company_name, manager_id, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (user_id, full_name, email, company_name, manager_id),
            )

    def update(self, user_id: str, *, full_name: str, company_name: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET full_name=%s, company_name=%s WHERE user_id=%s",
                (full_name, company_name, user_id),
            )
            return cur.rowcount > 0

    def set_active(self, user_id: str, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE profiles SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, user_id))
            return cur.rowcount > 0
