"""Salted one-way password hashing backed by passlib's bcrypt schemes.

New hashes use ``bcrypt_sha256``: the password is pre-hashed with
HMAC-SHA256 so bcrypt never sees more than 72 bytes and never truncates.
Plain ``bcrypt`` hashes still verify but are marked deprecated.
"""
from __future__ import annotations

from passlib.context import CryptContext

from .config import DEFAULT_BCRYPT_ROUNDS


class PasswordHasher:
    """Hash and verify passwords; hashes are salted so equal inputs differ."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._context = CryptContext(
            schemes=["bcrypt_sha256", "bcrypt"],
            deprecated="auto",
            bcrypt_sha256__rounds=rounds,
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Password must not be empty")
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            return False
        try:
            return self._context.verify(password, hashed)
        except ValueError:
            # Unknown or corrupt hash format, or a password the scheme refuses.
            return False

    def dummy_verify(self) -> None:
        """Spend the cost of one verification without a stored hash."""
        self._context.dummy_verify()


__all__ = ["PasswordHasher"]
