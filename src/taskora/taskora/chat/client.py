from __future__ import annotations

import logging
from typing import Iterator, List, Optional

import requests

from ..core.exceptions import ServiceError
from .sse import SSEStreamParser

logger = logging.getLogger(__name__)


class ChatCompletionClient:
    """Streams assistant text from an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        *,
        model: str,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        self._api_url = api_url
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._session = session or requests.Session()

    def stream(self, messages: List[dict]) -> Iterator[str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        payload = {"model": self._model, "messages": messages, "stream": True}

        try:
            response = self._session.post(
                self._api_url,
                json=payload,
                headers=headers,
                stream=True,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("chat request failed: %s", e)
            raise ServiceError("The AI service is unreachable. Please try again.") from e

        with response:
            if response.status_code == 429:
                raise ServiceError("Rate limits exceeded, please try again later.")
            if response.status_code == 402:
                raise ServiceError("Payment required, please add funds to your AI workspace.")
            if not response.ok:
                logger.error("chat endpoint answered %s", response.status_code)
                raise ServiceError("Failed to start the AI stream.")

            parser = SSEStreamParser()
            try:
                for chunk in response.iter_content(chunk_size=None):
                    for piece in parser.feed(chunk):
                        yield piece
                    if parser.done:
                        return
            except requests.RequestException as e:
                logger.error("chat stream interrupted: %s", e)
                raise ServiceError("The AI answer was interrupted.") from e
            for piece in parser.flush():
                yield piece
