"""Core utilities for the authboard authentication service."""

from __future__ import annotations

from typing import Any

from .database import Database, resolve_database_path
from .store import CredentialStore, InMemoryCredentialStore


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the API application."""

    from .api import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "CredentialStore",
    "Database",
    "InMemoryCredentialStore",
    "resolve_database_path",
    "create_app",
]
