"""Incremental parser for OpenAI-style ``text/event-stream`` bodies.

Bytes arrive in arbitrary chunks. The parser keeps a text buffer, splits it
into lines, ignores comments and blank keep-alives, decodes each ``data:``
payload as JSON and yields ``choices[0].delta.content``. ``data: [DONE]``
ends the stream.
"""

from __future__ import annotations

import codecs
import json
import logging
from typing import List

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"


def _delta_content(event: dict) -> str:
    choices = event.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    delta = choices[0].get("delta") or {}
    content = delta.get("content") if isinstance(delta, dict) else None
    return content if isinstance(content, str) else ""


class SSEStreamParser:
    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._retry_line = None
        self.done = False

    def feed(self, chunk) -> List[str]:
        """Add a chunk (bytes or str) and return the content pieces it completed."""
        if self.done:
            return []
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self._buffer += chunk
        return self._drain()

    def flush(self) -> List[str]:
        """End of body: parse a trailing line that had no newline."""
        if self.done:
            return []
        self._buffer += self._decoder.decode(b"", final=True)
        if self._buffer and not self._buffer.endswith("\n"):
            self._buffer += "\n"
        pieces = self._drain()
        if self._retry_line is not None:
            logger.warning("dropping undecodable event at end of stream")
            self._retry_line = None
            self._buffer = ""
        return pieces

    def _drain(self) -> List[str]:
        pieces: List[str] = []
        while not self.done:
            newline = self._buffer.find("\n")
            if newline == -1:
                break
            line = self._buffer[:newline]
            self._buffer = self._buffer[newline + 1:]

            if line.endswith("\r"):
                line = line[:-1]
            if not line or line.startswith(":"):
                continue
            if not line.startswith("data:"):
                continue

            payload = line[5:].strip()
            if payload == DONE_SENTINEL:
                self.done = True
                break

            try:
                event = json.loads(payload)
            except json.JSONDecodeError:
                if self._retry_line == line:
                    # already retried once and the stream has moved past it
                    logger.warning("skipping undecodable event: %.80s", payload)
                    self._retry_line = None
                    continue
                # keep the line and try again once more bytes arrive
                self._retry_line = line
                self._buffer = line + "\n" + self._buffer
                break

            self._retry_line = None
            if isinstance(event, dict):
                content = _delta_content(event)
                if content:
                    pieces.append(content)
        return pieces
