"""Registration and login form checks mirrored from the dashboard.

These rules exist to give operators the same feedback the browser form gives.
The server itself only enforces presence and the minimum password length.
"""
from __future__ import annotations

import enum
import re
from typing import Dict

MIN_PASSWORD_LENGTH = 8

_NAME_PATTERN = re.compile(r"^[A-Za-z\s]{3,30}$")
_EMAIL_PATTERN = re.compile(r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$", re.IGNORECASE)
_SPECIAL_PATTERN = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


class PasswordStrength(enum.IntEnum):
    NONE = 0
    WEAK = 1
    MEDIUM = 2
    STRONG = 3

    @property
    def label(self) -> str:
        return "" if self is PasswordStrength.NONE else self.name


def validate_name(name: str) -> str | None:
    """Return an error message for ``name`` or ``None`` when it is acceptable."""
    stripped = name.strip()
    if not stripped:
        return "Name is required"
    if not _NAME_PATTERN.match(stripped):
        return "Name must be 3-30 letters only"
    return None


def validate_email(email: str) -> str | None:
    stripped = email.strip()
    if not stripped:
        return "Email is required"
    if not _EMAIL_PATTERN.match(stripped):
        return "Enter a valid email address"
    return None


def password_requirements(password: str) -> Dict[str, bool]:
    return {
        "length": len(password) >= MIN_PASSWORD_LENGTH,
        "uppercase": any(char.isascii() and char.isupper() for char in password),
        "lowercase": any(char.isascii() and char.islower() for char in password),
        "number": any(char.isascii() and char.isdigit() for char in password),
        "special": bool(_SPECIAL_PATTERN.search(password)),
    }


def password_strength(password: str) -> PasswordStrength:
    """Bucket a password by how many composition requirements it meets."""
    if not password:
        return PasswordStrength.NONE
    score = sum(password_requirements(password).values())
    if score <= 2:
        return PasswordStrength.WEAK
    if score <= 4:
        return PasswordStrength.MEDIUM
    return PasswordStrength.STRONG


def validate_password(password: str) -> str | None:
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if password_strength(password) < PasswordStrength.MEDIUM:
        return "Password is too weak. Please make it stronger"
    return None


def validate_confirmation(password: str, confirm: str) -> str | None:
    if not confirm:
        return "Please confirm your password"
    if password != confirm:
        return "Passwords do not match"
    return None


def validate_registration(name: str, email: str, password: str, confirm: str) -> Dict[str, str]:
    """Return a mapping of field name to error message; empty when valid."""
    checks = {
        "name": validate_name(name),
        "email": validate_email(email),
        "password": validate_password(password),
        "confirm": validate_confirmation(password, confirm),
    }
    return {field: message for field, message in checks.items() if message}


def validate_login(email: str, password: str) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not email.strip():
        errors["email"] = "Email is required"
    if not password:
        errors["password"] = "Password is required"
    return errors


__all__ = [
    "MIN_PASSWORD_LENGTH",
    "PasswordStrength",
    "password_requirements",
    "password_strength",
    "validate_confirmation",
    "validate_email",
    "validate_login",
    "validate_name",
    "validate_password",
    "validate_registration",
]
