import importlib.util
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from authboard.database import Database
from authboard.errors import StoreUnavailable

PASSWORD = "Str0ngPass!"


def _load_script():
    spec = importlib.util.spec_from_file_location("create_user_script", ROOT / "scripts" / "create_user.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def script(monkeypatch, tmp_path: Path):
    config = tmp_path / "authboard.yaml"
    config.write_text("bcrypt_rounds: 4\n", encoding="utf-8")
    monkeypatch.setenv("AUTHBOARD_CONFIG", str(config))
    monkeypatch.delenv("AUTHBOARD_DB_PATH", raising=False)
    monkeypatch.setattr("getpass.getpass", lambda prompt="": PASSWORD)
    return _load_script()


def test_create_user_script_adds_user(script, monkeypatch, tmp_path: Path, capsys) -> None:
    db_path = tmp_path / "users.sqlite3"
    monkeypatch.setattr(sys, "argv", ["create_user.py", "Alice Smith", "alice@example.com", "--db", str(db_path)])

    assert script.main() == 0

    record = Database(db_path).find_by_email("alice@example.com")
    assert record is not None
    assert record.password_hash != PASSWORD
    assert "Created user #1" in capsys.readouterr().out


def test_create_user_script_reports_duplicate_email(script, monkeypatch, tmp_path: Path, capsys) -> None:
    db_path = tmp_path / "users.sqlite3"
    monkeypatch.setattr(sys, "argv", ["create_user.py", "Alice Smith", "alice@example.com", "--db", str(db_path)])
    assert script.main() == 0

    assert script.main() == 1
    assert "Error: Email already registered" in capsys.readouterr().err


def test_create_user_script_reports_unavailable_database(script, monkeypatch, tmp_path: Path, capsys) -> None:
    def fail_initialize(self) -> None:
        raise StoreUnavailable()

    monkeypatch.setattr(Database, "initialize", fail_initialize)
    monkeypatch.setattr(
        sys,
        "argv",
        ["create_user.py", "Alice Smith", "alice@example.com", "--db", str(tmp_path / "users.sqlite3")],
    )

    assert script.main() == 1
    assert "Error: Credential store unavailable" in capsys.readouterr().err
