from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Whiteboard


class WhiteboardRepository(Protocol):
    def list_visible(self, user_id: str) -> Sequence[Whiteboard]:
        """Boards owned by ``user_id`` plus every shared board."""

        raise NotImplementedError

    def get(self, board_id: int) -> Optional[Whiteboard]:
        raise NotImplementedError

    def create(self, *, owner_id: str, name: str) -> int:
        raise NotImplementedError

    def save_snapshot(self, board_id: int, snapshot: str) -> bool:
        raise NotImplementedError

    def set_shared(self, board_id: int, *, is_shared: bool) -> bool:
        raise NotImplementedError

    def delete(self, board_id: int) -> bool:
        raise NotImplementedError
