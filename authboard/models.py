"""Domain models for stored accounts and authenticated identities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict


@dataclass(frozen=True)
class User:
    """Public view of an account; never carries the password hash."""

    id: int
    name: str
    email: str
    created_at: datetime

    def summary(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class UserRecord:
    """Row held by the credential store, including the password hash."""

    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime

    def to_user(self) -> User:
        return User(id=self.id, name=self.name, email=self.email, created_at=self.created_at)


@dataclass(frozen=True)
class Identity:
    """Claims decoded from a verified bearer token."""

    user_id: int
    email: str


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str


__all__ = ["AuthResult", "Identity", "User", "UserRecord"]
