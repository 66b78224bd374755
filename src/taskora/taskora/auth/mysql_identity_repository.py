from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Account, StoredSession
from .repository import IdentityRepository


class MySQLIdentityRepository(IdentityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_account(row: dict) -> Account:
        return Account(
            user_id=row["user_id"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row.get("created_at"),
        )

    def get_account(self, user_id: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, email, password_hash, created_at FROM accounts WHERE user_id=%s",
                (user_id,),
            )
            row = fetchone(cur)
            return self._to_account(row) if row else None

    def get_account_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, email, password_hash, created_at FROM accounts WHERE email=%s",
                (email,),
            )
            row = fetchone(cur)
            return self._to_account(row) if row else None

    def create_account(self, *, user_id: str, email: str, password_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO accounts(user_id, email, password_hash) VALUES(%s,%s,%s)",
                (user_id, email, password_hash),
            )

    def delete_account(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM accounts WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE accounts SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
            return cur.rowcount > 0

    def create_session(self, *, user_id: str, token_hash: str, expires_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO auth_sessions(user_id, token_hash, expires_at) VALUES(%s,%s,%s)",
                (user_id, token_hash, expires_at),
            )

    def get_session(self, token_hash: str) -> Optional[StoredSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.user_id, a.email, s.expires_at
                FROM auth_sessions s
                JOIN accounts a ON a.user_id = s.user_id
                WHERE s.token_hash=%s
                """,
                (token_hash,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return StoredSession(user_id=row["user_id"], email=row["email"], expires_at=row["expires_at"])

    def delete_session(self, token_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM auth_sessions WHERE token_hash=%s", (token_hash,))
