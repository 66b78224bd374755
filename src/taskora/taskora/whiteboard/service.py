from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError, ValidationError
from .autosave import AutosaveDebouncer
from .model import Whiteboard
from .repository import WhiteboardRepository

logger = logging.getLogger(__name__)

PNG_DATA_URL_PREFIX = "data:image/png;base64,"
MAX_SNAPSHOT_CHARS = 15 * 1024 * 1024


def validate_snapshot(snapshot: str) -> str:
    """Check that ``snapshot`` is a PNG data URL that decodes.

    The string is returned untouched: boards are stored exactly as the
    canvas exported them and never re-encoded.
    """
    if not isinstance(snapshot, str) or not snapshot.startswith(PNG_DATA_URL_PREFIX):
        raise ValidationError("Snapshot must be a PNG data URL")
    if len(snapshot) > MAX_SNAPSHOT_CHARS:
        raise ValidationError("Snapshot is too large")
    try:
        raw = base64.b64decode(snapshot[len(PNG_DATA_URL_PREFIX):], validate=True)
        with Image.open(io.BytesIO(raw)) as img:
            if img.format != "PNG":
                raise ValidationError("Snapshot must be a PNG image")
            img.verify()
    except (binascii.Error, UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValidationError("Snapshot is not a valid image") from e
    return snapshot


class WhiteboardService:
    def __init__(self, boards: WhiteboardRepository, autosave: Optional[AutosaveDebouncer] = None):
        self._boards = boards
        self._autosave = autosave or AutosaveDebouncer()

    def list_boards(self, user_id: str) -> List[Whiteboard]:
        return list(self._boards.list_visible(user_id))

    def create_board(self, *, owner_id: str, name: str) -> int:
        name = require_non_empty(name, "Board name")
        return self._boards.create(owner_id=owner_id, name=name[:200])

    def load(self, *, user_id: str, board_id: int) -> Whiteboard:
        board = self._boards.get(board_id)
        if not board or (board.owner_id != user_id and not board.is_shared):
            raise ValidationError("Whiteboard not found")
        return board

    def _owned(self, user_id: str, board_id: int) -> Whiteboard:
        board = self.load(user_id=user_id, board_id=board_id)
        if board.owner_id != user_id:
            raise AuthorizationError("Only the owner can change this whiteboard")
        return board

    def save(self, *, user_id: str, board_id: int, snapshot: str) -> None:
        """Explicit save: drops any pending autosave and writes now."""
        self._owned(user_id, board_id)
        snapshot = validate_snapshot(snapshot)
        self._autosave.cancel(board_id)
        self._boards.save_snapshot(board_id, snapshot)

    def queue_autosave(self, *, user_id: str, board_id: int, snapshot: str) -> None:
        self._owned(user_id, board_id)
        snapshot = validate_snapshot(snapshot)
        self._autosave.schedule(board_id, lambda: self._boards.save_snapshot(board_id, snapshot))

    def flush_autosave(self, *, user_id: str, board_id: int) -> bool:
        self._owned(user_id, board_id)
        return self._autosave.flush(board_id)

    def toggle_shared(self, *, user_id: str, board_id: int) -> bool:
        board = self._owned(user_id, board_id)
        self._boards.set_shared(board_id, is_shared=not board.is_shared)
        return not board.is_shared

    def delete(self, *, user_id: str, board_id: int) -> None:
        self._owned(user_id, board_id)
        self._autosave.cancel(board_id)
        self._boards.delete(board_id)
        logger.info("whiteboard %s deleted by %s", board_id, user_id)
