import argparse
import getpass
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from authboard.config import load_settings
from authboard.database import Database, resolve_database_path
from authboard.errors import AuthError
from authboard.forms import password_strength, validate_email, validate_name, validate_password
from authboard.passwords import PasswordHasher


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an authboard user")
    parser.add_argument("name", help="Display name for the user")
    parser.add_argument("email", help="Unique email address for login")
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to the SQLite database (defaults to AUTHBOARD_DB_PATH or data/authboard.sqlite3)",
    )
    return parser.parse_args()


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        problem = validate_password(password)
        if problem:
            print(problem, file=sys.stderr)
            continue
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        print(f"Password strength: {password_strength(password).label}")
        return password
    raise SystemExit("Failed to set password after three attempts.")


def main() -> int:
    args = parse_args()

    for problem in (validate_name(args.name), validate_email(args.email)):
        if problem:
            print(f"Error: {problem}", file=sys.stderr)
            return 1

    password = prompt_for_password()

    settings = load_settings()
    db_path = resolve_database_path(args.db_path) if args.db_path else settings.database_path

    database = Database(db_path)

    try:
        database.initialize()
        record = database.insert(
            args.name.strip(),
            args.email.strip(),
            PasswordHasher(rounds=settings.bcrypt_rounds).hash(password),
        )
    except AuthError as exc:  # duplicates, unavailable store
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Created user #{record.id}: {record.name} <{record.email}>")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
