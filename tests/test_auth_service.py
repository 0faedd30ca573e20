"""Behaviour of the registration and login flow against the in-memory store."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import anyio
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from authboard.errors import DuplicateEmail, InvalidCredentials, InvalidToken, UserNotFound, ValidationError
from authboard.passwords import PasswordHasher
from authboard.security import AccessGuard
from authboard.service import AuthService
from authboard.store import InMemoryCredentialStore
from authboard.tokens import TokenIssuer

SECRET = "tests-secret-key"
NAME = "Alice Smith"
EMAIL = "alice@example.com"
PASSWORD = "Str0ngPass!"


@pytest.fixture()
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture()
def service(store: InMemoryCredentialStore) -> AuthService:
    return AuthService(store, PasswordHasher(rounds=4), TokenIssuer(SECRET))


def test_register_then_login_succeeds(service: AuthService, store: InMemoryCredentialStore) -> None:
    registered = anyio.run(service.register, NAME, EMAIL, PASSWORD)

    assert registered.user.email == EMAIL
    assert registered.user.name == NAME
    assert registered.token
    assert not hasattr(registered.user, "password_hash")

    stored = store.find_by_email(EMAIL)
    assert stored is not None
    assert stored.password_hash != PASSWORD

    logged_in = anyio.run(service.login, EMAIL, PASSWORD)
    assert logged_in.user.id == registered.user.id
    assert service.tokens.verify(logged_in.token).user_id == registered.user.id


def test_register_strips_name_and_email(service: AuthService) -> None:
    result = anyio.run(service.register, "  Bob Jones ", " bob@example.com ", PASSWORD)

    assert result.user.name == "Bob Jones"
    assert result.user.email == "bob@example.com"


@pytest.mark.parametrize(
    "name, email, password",
    [
        ("", EMAIL, PASSWORD),
        (NAME, "", PASSWORD),
        (NAME, EMAIL, ""),
        ("   ", EMAIL, PASSWORD),
    ],
)
def test_register_requires_every_field(service: AuthService, name: str, email: str, password: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        anyio.run(service.register, name, email, password)
    assert excinfo.value.message == "All fields are required"


def test_register_rejects_short_password(service: AuthService, store: InMemoryCredentialStore) -> None:
    with pytest.raises(ValidationError) as excinfo:
        anyio.run(service.register, NAME, EMAIL, "short7!")
    assert excinfo.value.message == "Password must be at least 8 characters"
    assert len(store) == 0


def test_register_rejects_password_with_nul_character(service: AuthService, store: InMemoryCredentialStore) -> None:
    with pytest.raises(ValidationError) as excinfo:
        anyio.run(service.register, NAME, EMAIL, "abc\u0000defgh")
    assert excinfo.value.message == "Password contains unsupported characters"
    assert len(store) == 0


def test_duplicate_registration_keeps_single_record(service: AuthService, store: InMemoryCredentialStore) -> None:
    anyio.run(service.register, NAME, EMAIL, PASSWORD)

    with pytest.raises(DuplicateEmail) as excinfo:
        anyio.run(service.register, "Imposter", EMAIL, "AnotherPass1!")

    assert excinfo.value.message == "Email already registered"
    assert len(store) == 1
    assert store.find_by_email(EMAIL).name == NAME


def test_unknown_email_and_wrong_password_are_indistinguishable(service: AuthService) -> None:
    anyio.run(service.register, NAME, EMAIL, PASSWORD)

    with pytest.raises(InvalidCredentials) as unknown:
        anyio.run(service.login, "nobody@example.com", PASSWORD)
    with pytest.raises(InvalidCredentials) as wrong:
        anyio.run(service.login, EMAIL, "wrong")

    assert unknown.value.message == wrong.value.message == "Invalid email or password"
    assert unknown.value.status_code == wrong.value.status_code


def test_login_requires_email_and_password(service: AuthService) -> None:
    with pytest.raises(ValidationError) as excinfo:
        anyio.run(service.login, "", PASSWORD)
    assert excinfo.value.message == "Email and password are required"


def test_issued_token_passes_guard_until_expiry(store: InMemoryCredentialStore) -> None:
    issued_at = datetime.now(timezone.utc)
    clock = {"now": issued_at}
    tokens = TokenIssuer(SECRET, ttl=timedelta(hours=24), clock=lambda: clock["now"])
    service = AuthService(store, PasswordHasher(rounds=4), tokens)
    guard = AccessGuard(TokenIssuer(SECRET))

    result = anyio.run(service.register, NAME, EMAIL, PASSWORD)
    assert guard.authenticate(f"Bearer {result.token}").user_id == result.user.id

    clock["now"] = issued_at - timedelta(hours=25)
    expired = anyio.run(service.login, EMAIL, PASSWORD).token
    with pytest.raises(InvalidToken):
        guard.authenticate(f"Bearer {expired}")


def test_profile_and_listing(service: AuthService) -> None:
    first = anyio.run(service.register, "First User", "first@example.com", PASSWORD).user
    second = anyio.run(service.register, "Second User", "second@example.com", PASSWORD).user

    assert anyio.run(service.profile, first.id) == first
    assert [user.id for user in anyio.run(service.list_users)] == [second.id, first.id]

    with pytest.raises(UserNotFound):
        anyio.run(service.profile, 999)
