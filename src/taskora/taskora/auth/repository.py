from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Account, StoredSession


class IdentityRepository(Protocol):
    """Accounts and server-side sessions of the identity service."""

    def get_account(self, user_id: str) -> Optional[Account]:
        raise NotImplementedError

    def get_account_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(self, *, user_id: str, email: str, password_hash: str) -> None:
        """Raises ConflictError when the e-mail is taken."""

        raise NotImplementedError

    def delete_account(self, user_id: str) -> bool:
        """Delete the account; dependent rows go with it (ON DELETE CASCADE)."""

        raise NotImplementedError

    def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        raise NotImplementedError

    def create_session(self, *, user_id: str, token_hash: str, expires_at: datetime) -> None:
        raise NotImplementedError

    def get_session(self, token_hash: str) -> Optional[StoredSession]:
        raise NotImplementedError

    def delete_session(self, token_hash: str) -> None:
        raise NotImplementedError
