"""Command-line interface for the authboard service."""

from __future__ import annotations
import argparse
import logging
import sys
from getpass import getpass
from typing import Sequence

import httpx

from authboard.config import Settings, load_settings
from authboard.database import Database
from authboard.errors import DuplicateEmail, StoreUnavailable
from authboard.forms import password_strength, validate_email, validate_name, validate_password
from authboard.passwords import PasswordHasher

logger = logging.getLogger("authboard.main")

_DEFAULT_SERVICE_URL = "http://localhost:3000"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Authboard authentication service")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", help="Initialise the user database")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: from settings)")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listening port (default: from settings, 3000)",
    )

    subparsers.add_parser("admin", help="Launch the interactive administration console")

    status_parser = subparsers.add_parser("status", help="Check that a running service responds")
    status_parser.add_argument(
        "--service-url",
        default=_DEFAULT_SERVICE_URL,
        help=f"Base URL of the running service (default: {_DEFAULT_SERVICE_URL})",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "admin", "init-db", "status"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _load_settings() -> Settings:
    try:
        return load_settings()
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc


def _initialise_database(settings: Settings) -> Database:
    database = Database(settings.database_path)
    try:
        database.initialize()
    except StoreUnavailable as exc:
        raise SystemExit(f"Unable to initialise database at {settings.database_path}") from exc
    return database


def _serve(*, settings: Settings, database: Database, host: str | None, port: int | None) -> None:
    from authboard.api import create_app
    import uvicorn

    if host:
        settings = settings.with_overrides(host=host)
    if port:
        settings = settings.with_overrides(port=port)

    try:
        app = create_app(settings=settings, store=database)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    base_url = f"http://localhost:{settings.port}"
    logger.info("Starting authboard API on http://%s:%s", settings.host, settings.port)
    logger.info("Test API: %s/api/test", base_url)
    logger.info("View users: %s/api/users", base_url)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")


def _check_status(service_url: str) -> int:
    endpoint = service_url.rstrip("/") + "/api/test"
    try:
        response = httpx.get(endpoint, timeout=10.0)
    except httpx.HTTPError as exc:
        print(f"Failed to contact service at {endpoint}: {exc}")
        return 1

    if response.status_code != 200:
        print(f"Service responded with {response.status_code}: {response.text.strip()}")
        return 1

    try:
        payload = response.json()
    except ValueError:
        print("Service returned an unexpected response format.")
        return 1

    print(f"{payload.get('message', 'OK')} ({payload.get('timestamp', 'unknown time')})")
    return 0


def _run_admin_cli(database: Database, settings: Settings) -> None:
    """Provide an interactive console for administrators."""

    print("Authboard Administration Console")
    print("Press Ctrl+C at any time to exit.\n")

    try:
        while True:
            print("Select an option:")
            print("  1) List all users")
            print("  2) Add a new user")
            print("  3) Check a running service")
            print("  4) Exit")

            choice = input("Enter choice [1-4]: ").strip()

            if choice == "1":
                _list_users(database)
            elif choice == "2":
                _add_user(database, PasswordHasher(rounds=settings.bcrypt_rounds))
            elif choice == "3":
                url = input(f"Service URL [{_DEFAULT_SERVICE_URL}]: ").strip() or _DEFAULT_SERVICE_URL
                _check_status(url)
            elif choice == "4":
                print("Goodbye!")
                return
            else:
                print("Invalid selection. Please choose a number from the menu.\n")

            print()
    except KeyboardInterrupt:
        print("\nExiting administration console.")


def _list_users(database: Database) -> None:
    try:
        records = database.list_all()
    except StoreUnavailable as exc:
        print(f"Failed to fetch users: {exc}")
        return

    if not records:
        print("No users are currently registered.")
        return

    print(f"{len(records)} user(s) found:")
    print(f"{'ID':>4}  {'Name':<24}  {'Email':<32}  Created")
    print("-" * 80)
    for record in records:
        created = record.created_at.strftime("%Y-%m-%d %H:%M:%S %Z")
        print(f"{record.id:>4}  {record.name:<24}  {record.email:<32}  {created}")


def _add_user(database: Database, hasher: PasswordHasher) -> None:
    print("\nCreate a new user (leave the name blank to cancel).")
    name = input("Name: ").strip()
    if not name:
        print("User creation cancelled.")
        return

    problem = validate_name(name)
    if problem:
        print(problem)
        return

    email = input("Email address: ").strip()
    problem = validate_email(email)
    if problem:
        print(problem)
        return

    password = _prompt_for_password()
    if password is None:
        print("Aborted creating user.")
        return

    try:
        record = database.insert(name, email, hasher.hash(password))
    except (DuplicateEmail, StoreUnavailable) as exc:
        print(f"Failed to create user: {exc}")
        return

    print(f"Created user #{record.id}: {record.name} <{record.email}>")


def _prompt_for_password() -> str | None:
    for _ in range(3):
        password = getpass("Password (min 8 characters): ")
        problem = validate_password(password)
        if problem:
            print(problem)
            continue
        print(f"Strength: {password_strength(password).label}")
        confirmation = getpass("Confirm password: ")
        if password != confirmation:
            print("Passwords do not match. Please try again.")
            continue
        return password
    return None


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)

    if args.command == "status":
        return _check_status(args.service_url)

    settings = _load_settings()
    database = _initialise_database(settings)

    if args.command == "serve":
        _serve(settings=settings, database=database, host=args.host, port=args.port)
    elif args.command == "admin":
        _run_admin_cli(database, settings)
    elif args.command == "init-db":
        print("Database initialisation complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
