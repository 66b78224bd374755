from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Protocol

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are Taskora AI, a helpful assistant for the Taskora company management workspace. "
    "Help users with tasks, staff, attendance, files, notifications and the whiteboard. "
    "Keep answers short and practical."
)
WELCOME = (
    "Hello! I'm Taskora AI. I can explain features and answer your questions "
    "about Taskora. How can I help you today?"
)
MAX_HISTORY = 40


class ChatBackend(Protocol):
    def stream(self, messages: List[dict]) -> Iterator[str]:
        raise NotImplementedError


@dataclass
class ChatMessage:
    role: str
    content: str
    created_at: datetime = field(default_factory=now_local)


class ChatConversation:
    """Message list of one assistant chat.

    ``busy`` is set while an answer streams; a second ``send`` is refused
    until the turn is released. The stream releases its own turn when it
    ends; a caller that may drop the stream unread must call ``release``
    with ``active_turn``.
    """

    def __init__(self, backend: ChatBackend):
        self._backend = backend
        self._lock = threading.Lock()
        self.busy = False
        self.active_turn: Optional[object] = None
        self.messages: List[ChatMessage] = [ChatMessage("assistant", WELCOME)]

    def _payload(self) -> List[dict]:
        history = [m for m in self.messages[1:] if m.content][-MAX_HISTORY:]
        return [{"role": "system", "content": SYSTEM_PROMPT}] + [
            {"role": m.role, "content": m.content} for m in history
        ]

    def send(self, content: str) -> Iterator[str]:
        with self._lock:
            if self.busy:
                raise ValidationError("Please wait for the current answer to finish")
            text = require_non_empty(content, "Message")
            self.busy = True
            turn = self.active_turn = object()
        self.messages.append(ChatMessage("user", text))
        return self._stream(turn)

    def release(self, turn: object) -> None:
        with self._lock:
            if turn is self.active_turn:
                self.active_turn = None
                self.busy = False

    def _stream(self, turn: object) -> Iterator[str]:
        reply = ChatMessage("assistant", "")
        payload = self._payload()
        self.messages.append(reply)
        try:
            for piece in self._backend.stream(payload):
                reply.content += piece
                yield piece
        finally:
            if not reply.content:
                self.messages.remove(reply)
            self.release(turn)


class ChatService:
    """One conversation per user, kept in process memory."""

    def __init__(self, backend: ChatBackend):
        self._backend = backend
        self._lock = threading.Lock()
        self._conversations: Dict[str, ChatConversation] = {}

    def conversation_for(self, user_id: str) -> ChatConversation:
        with self._lock:
            conversation = self._conversations.get(user_id)
            if conversation is None:
                conversation = ChatConversation(self._backend)
                self._conversations[user_id] = conversation
            return conversation

    def reset(self, user_id: str) -> None:
        with self._lock:
            self._conversations.pop(user_id, None)
