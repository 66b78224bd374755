from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Whiteboard
from .repository import WhiteboardRepository

_COLUMNS = "board_id, owner_id, name, snapshot, is_shared, created_at, updated_at"


def _to_board(r: dict) -> Whiteboard:
    return Whiteboard(
        board_id=int(r["board_id"]),
        owner_id=r["owner_id"],
        name=r["name"],
        snapshot=r.get("snapshot"),
        is_shared=bool(r.get("is_shared")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLWhiteboardRepository(WhiteboardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_visible(self, user_id: str) -> Sequence[Whiteboard]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM whiteboards
                WHERE owner_id=%s OR is_shared=1
                ORDER BY updated_at DESC, board_id DESC
                """,
                (user_id,),
            )
            return [_to_board(r) for r in fetchall(cur)]

    def get(self, board_id: int) -> Optional[Whiteboard]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM whiteboards WHERE board_id=%s", (board_id,))
            r = fetchone(cur)
            return _to_board(r) if r else None

    def create(self, *, owner_id: str, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO whiteboards(owner_id, name) VALUES(%s,%s)", (owner_id, name))
            return int(cur.lastrowid)

    def save_snapshot(self, board_id: int, snapshot: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE whiteboards SET snapshot=%s WHERE board_id=%s", (snapshot, board_id))
            return cur.rowcount > 0

    def set_shared(self, board_id: int, *, is_shared: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE whiteboards SET is_shared=%s WHERE board_id=%s", (1 if is_shared else 0, board_id))
            return cur.rowcount > 0

    def delete(self, board_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM whiteboards WHERE board_id=%s", (board_id,))
            return cur.rowcount > 0
