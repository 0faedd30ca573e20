"""Registration and login orchestration."""

from __future__ import annotations

import logging
from typing import List

import anyio

from .errors import DuplicateEmail, InvalidCredentials, UserNotFound, ValidationError
from .forms import MIN_PASSWORD_LENGTH
from .models import AuthResult, User
from .passwords import PasswordHasher
from .store import CredentialStore
from .tokens import TokenIssuer

logger = logging.getLogger("authboard.service")


class AuthService:
    """Validate credentials, talk to the store and mint bearer tokens.

    Store and hashing calls block, so each one runs on a worker thread. They
    are awaited one after another; a request never fans out.
    """

    def __init__(self, store: CredentialStore, hasher: PasswordHasher, tokens: TokenIssuer) -> None:
        self._store = store
        self._hasher = hasher
        self._tokens = tokens

    @property
    def tokens(self) -> TokenIssuer:
        return self._tokens

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        name = (name or "").strip()
        email = (email or "").strip()
        password = password or ""

        if not name or not email or not password:
            raise ValidationError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if "\x00" in password:
            raise ValidationError("Password contains unsupported characters")

        try:
            password_hash = await anyio.to_thread.run_sync(self._hasher.hash, password)
        except ValueError as exc:
            raise ValidationError("Password contains unsupported characters") from exc

        try:
            record = await anyio.to_thread.run_sync(self._store.insert, name, email, password_hash)
        except DuplicateEmail:
            logger.warning("Registration rejected for %s: email already registered", email)
            raise

        user = record.to_user()
        logger.info("Registered user %s", user.id)
        return AuthResult(user=user, token=self._tokens.issue(user.id, user.email))

    async def login(self, email: str, password: str) -> AuthResult:
        email = (email or "").strip()
        password = password or ""
        if not email or not password:
            raise ValidationError("Email and password are required")

        record = await anyio.to_thread.run_sync(self._store.find_by_email, email)
        if record is None:
            # Burn a verification so unknown emails cost the same as bad passwords.
            await anyio.to_thread.run_sync(self._hasher.dummy_verify)
            logger.warning("Failed login attempt for %s", email)
            raise InvalidCredentials()

        valid = await anyio.to_thread.run_sync(self._hasher.verify, password, record.password_hash)
        if not valid:
            logger.warning("Failed login attempt for %s", email)
            raise InvalidCredentials()

        user = record.to_user()
        logger.info("User %s signed in", user.id)
        return AuthResult(user=user, token=self._tokens.issue(user.id, user.email))

    async def profile(self, user_id: int) -> User:
        record = await anyio.to_thread.run_sync(self._store.find_by_id, user_id)
        if record is None:
            raise UserNotFound()
        return record.to_user()

    async def list_users(self) -> List[User]:
        records = await anyio.to_thread.run_sync(self._store.list_all)
        return [record.to_user() for record in records]


__all__ = ["AuthService"]
