from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Account:
    """Login identity: e-mail plus password hash, keyed by an opaque id."""

    user_id: str
    email: str
    password_hash: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Principal:
    """The authenticated caller as seen by the rest of the application."""

    user_id: str
    email: str


@dataclass(frozen=True)
class StoredSession:
    user_id: str
    email: str
    expires_at: datetime


@dataclass(frozen=True)
class AuthSession:
    """Transient session handed to the browser (the raw token is never stored)."""

    user_id: str
    email: str
    access_token: str
    expires_at: datetime
