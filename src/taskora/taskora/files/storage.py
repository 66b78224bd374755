"""Object storage for file attachments, kept on the local filesystem."""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import re
import time
from typing import Iterable, Optional
from urllib.parse import quote
from uuid import uuid4

from ..core.constants import DEFAULT_SIGNED_URL_TTL_SECONDS
from ..core.exceptions import ServiceError, ValidationError

logger = logging.getLogger(__name__)

SIGNED_URL_PREFIX = "/files/object/"


def build_object_name(namespace: Optional[str], filename: str) -> str:
    """Normalized object key ``<namespace>/<uuid>_<safe name>``."""
    safe_name = re.sub(r"[^A-Za-z0-9_.-]", "_", filename) or "file.bin"
    if not namespace:
        return f"{uuid4()}_{safe_name}"
    clean_namespace = re.sub(r"[^A-Za-z0-9/_.-]", "_", namespace).strip("/")
    return f"{clean_namespace}/{uuid4()}_{safe_name}"


class LocalObjectStorage:
    """upload / download / signed URL / remove over a directory tree.

    Signed URLs carry an expiry timestamp and an HMAC of ``path:expires`` so
    a link can be shared without a session until it runs out.
    """

    def __init__(self, root_dir: str, secret_key: str, *, default_ttl: int = DEFAULT_SIGNED_URL_TTL_SECONDS):
        self._root = os.path.abspath(root_dir)
        self._secret = secret_key.encode("utf-8")
        self._default_ttl = int(default_ttl)

    def _full_path(self, path: str) -> str:
        full = os.path.abspath(os.path.join(self._root, path))
        if not full.startswith(self._root + os.sep):
            raise ValidationError("Invalid storage path")
        return full

    def upload(self, path: str, data: bytes) -> None:
        full = self._full_path(path)
        try:
            os.makedirs(os.path.dirname(full), exist_ok=True)
            with open(full, "wb") as handle:
                handle.write(data)
        except OSError as e:
            logger.error("storage upload failed for %s: %s", path, e)
            raise ServiceError("Could not store the file") from e

    def download(self, path: str) -> bytes:
        full = self._full_path(path)
        try:
            with open(full, "rb") as handle:
                return handle.read()
        except FileNotFoundError as e:
            raise ValidationError("File not found") from e
        except OSError as e:
            logger.error("storage download failed for %s: %s", path, e)
            raise ServiceError("Could not read the file") from e

    def exists(self, path: str) -> bool:
        return os.path.isfile(self._full_path(path))

    def remove(self, paths: Iterable[str]) -> None:
        for path in paths:
            full = self._full_path(path)
            try:
                os.remove(full)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.error("storage remove failed for %s: %s", path, e)
                raise ServiceError("Could not remove the file") from e

    def _signature(self, path: str, expires: int) -> str:
        return hmac.new(self._secret, f"{path}:{expires}".encode("utf-8"), hashlib.sha256).hexdigest()

    def create_signed_url(self, path: str, ttl_seconds: Optional[int] = None, *, now: Optional[float] = None) -> str:
        ttl = self._default_ttl if ttl_seconds is None else int(ttl_seconds)
        if ttl <= 0:
            raise ValidationError("Expiry must be positive")
        expires = int((time.time() if now is None else now) + ttl)
        return f"{SIGNED_URL_PREFIX}{quote(path)}?expires={expires}&signature={self._signature(path, expires)}"

    def verify_signed(self, path: str, expires: str, signature: str, *, now: Optional[float] = None) -> bool:
        try:
            expires_at = int(expires)
        except (TypeError, ValueError):
            return False
        if expires_at < (time.time() if now is None else now):
            return False
        return hmac.compare_digest(self._signature(path, expires_at), signature or "")
