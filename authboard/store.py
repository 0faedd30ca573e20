"""Credential store contract and an in-memory implementation."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .errors import DuplicateEmail
from .models import UserRecord


class CredentialStore(ABC):
    """Persistence for user records keyed by a unique email address.

    ``insert`` must be atomic with respect to the uniqueness constraint: when
    several callers insert the same email concurrently exactly one succeeds
    and the others receive :class:`DuplicateEmail`. Infrastructure failures
    are reported as :class:`~authboard.errors.StoreUnavailable`.
    """

    @abstractmethod
    def insert(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Persist a new record and return it with its assigned id."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def list_all(self) -> List[UserRecord]:
        """Return every record, newest ``created_at`` first."""


class InMemoryCredentialStore(CredentialStore):
    """Dictionary-backed store for tests and throwaway instances."""

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._records: Dict[int, UserRecord] = {}
        self._by_email: Dict[str, int] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def insert(self, name: str, email: str, password_hash: str) -> UserRecord:
        with self._lock:
            if email in self._by_email:
                raise DuplicateEmail()
            record = UserRecord(
                id=self._next_id,
                name=name,
                email=email,
                password_hash=password_hash,
                created_at=self._clock(),
            )
            self._next_id += 1
            self._records[record.id] = record
            self._by_email[email] = record.id
        return record

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            user_id = self._by_email.get(email)
            return self._records.get(user_id) if user_id is not None else None

    def find_by_id(self, user_id: int) -> Optional[UserRecord]:
        with self._lock:
            return self._records.get(user_id)

    def list_all(self) -> List[UserRecord]:
        with self._lock:
            records = list(self._records.values())
        return sorted(records, key=lambda record: (record.created_at, record.id), reverse=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["CredentialStore", "InMemoryCredentialStore"]
