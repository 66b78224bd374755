from __future__ import annotations

import hashlib
import logging
import secrets
import uuid
from datetime import timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_password
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import AuthenticationError, ConflictError, ValidationError
from .model import AuthSession, Principal
from .repository import IdentityRepository

logger = logging.getLogger(__name__)


def hash_token(access_token: str) -> str:
    return hashlib.sha256(access_token.encode("utf-8")).hexdigest()


class IdentityService:
    """Use case: e-mail/password accounts and opaque session tokens.

    Tokens are random strings handed to the browser; only their SHA-256 digest
    is stored, so a leaked ``auth_sessions`` table cannot be replayed.
    """

    def __init__(
        self,
        accounts: IdentityRepository,
        *,
        session_days: int = DEFAULT_SESSION_DAYS,
        clock: Callable = now_local,
    ):
        self._accounts = accounts
        self._session_days = int(session_days)
        self._clock = clock

    def sign_in(self, email: str, password: str) -> AuthSession:
        email = (email or "").strip().lower()
        account = self._accounts.get_account_by_email(email) if email else None
        if not account:
            raise AuthenticationError("Invalid login credentials")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hash
            ok = False
        if not ok:
            raise AuthenticationError("Invalid login credentials")

        access_token = secrets.token_urlsafe(32)
        expires_at = self._clock() + timedelta(days=self._session_days)
        self._accounts.create_session(user_id=account.user_id, token_hash=hash_token(access_token), expires_at=expires_at)
        logger.info("signed in %s", account.user_id)
        return AuthSession(user_id=account.user_id, email=account.email, access_token=access_token, expires_at=expires_at)

    def sign_up(self, email: str, password: str) -> Principal:
        return self.create_account(email, password)

    def create_account(self, email: str, password: str) -> Principal:
        email = require_email(email)
        require_password(password)
        if self._accounts.get_account_by_email(email):
            raise ValidationError("User already registered")

        user_id = str(uuid.uuid4())
        try:
            self._accounts.create_account(user_id=user_id, email=email, password_hash=generate_password_hash(password))
        except ConflictError as e:
            raise ValidationError("User already registered") from e
        logger.info("account created %s", user_id)
        return Principal(user_id=user_id, email=email)

    def get_user(self, access_token: Optional[str]) -> Optional[Principal]:
        if not access_token:
            return None
        token_hash = hash_token(access_token)
        stored = self._accounts.get_session(token_hash)
        if not stored:
            return None
        if stored.expires_at <= self._clock():
            self._accounts.delete_session(token_hash)
            return None
        return Principal(user_id=stored.user_id, email=stored.email)

    def sign_out(self, access_token: Optional[str]) -> None:
        if access_token:
            self._accounts.delete_session(hash_token(access_token))

    def update_password(self, user_id: str, new_password: str) -> None:
        require_password(new_password)
        if not self._accounts.update_password_hash(user_id, generate_password_hash(new_password)):
            raise ValidationError("User not found")

    def delete_account(self, user_id: str) -> bool:
        deleted = self._accounts.delete_account(user_id)
        if deleted:
            logger.info("account deleted %s", user_id)
        return deleted
