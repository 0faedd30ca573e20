"""Configuration management for the authboard service."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import timedelta
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .database import resolve_database_path

DEFAULT_PORT = 3000
DEFAULT_TOKEN_TTL_HOURS = 24
DEFAULT_BCRYPT_ROUNDS = 10

_ENV_OVERRIDES = {
    "AUTHBOARD_SECRET_KEY": "secret_key",
    "AUTHBOARD_HOST": "host",
    "AUTHBOARD_PORT": "port",
    "AUTHBOARD_DB_PATH": "database_path",
    "AUTHBOARD_TOKEN_TTL_HOURS": "token_ttl_hours",
}


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, built once at start-up and passed explicitly."""

    secret_key: str
    database_path: Path
    algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(hours=DEFAULT_TOKEN_TTL_HOURS)
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS

    def require_secret(self) -> str:
        if not self.secret_key:
            raise ValueError(
                "No token signing secret configured. Set secret_key in the configuration file "
                "or the AUTHBOARD_SECRET_KEY environment variable."
            )
        return self.secret_key

    @staticmethod
    def from_dict(data: Mapping[str, object], base_path: Path | None = None) -> "Settings":
        """Create :class:`Settings` from raw dictionary data."""
        secret = str(data.get("secret_key") or "").strip()

        raw_db_path = data.get("database_path")
        if raw_db_path:
            candidate = Path(str(raw_db_path)).expanduser()
            if not candidate.is_absolute() and base_path is not None:
                candidate = base_path / candidate
            database_path = candidate.resolve(strict=False)
        else:
            database_path = resolve_database_path(None)

        try:
            ttl_hours = float(data.get("token_ttl_hours", DEFAULT_TOKEN_TTL_HOURS))
            port = int(data.get("port", DEFAULT_PORT))
            rounds = int(data.get("bcrypt_rounds", DEFAULT_BCRYPT_ROUNDS))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid numeric setting: {exc}") from exc

        if ttl_hours <= 0:
            raise ValueError("token_ttl_hours must be positive")
        if not 1 <= port <= 65535:
            raise ValueError("port must be between 1 and 65535")

        return Settings(
            secret_key=secret,
            database_path=database_path,
            algorithm=str(data.get("algorithm", "HS256")),
            token_ttl=timedelta(hours=ttl_hours),
            host=str(data.get("host", "0.0.0.0")),
            port=port,
            bcrypt_rounds=rounds,
        )

    def with_overrides(self, **changes: object) -> "Settings":
        return replace(self, **changes)


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the YAML configuration file."""
    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    return (Path(__file__).resolve().parent.parent / "config" / "authboard.yaml").resolve(strict=False)


def load_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from an optional YAML file, then apply environment overrides."""
    env = os.environ if environ is None else environ
    if config_path is None:
        config_path = resolve_config_path(env.get("AUTHBOARD_CONFIG"))

    raw: Dict[str, object] = {}
    if config_path.is_file():
        with config_path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")
        raw.update(loaded)

    for env_name, key in _ENV_OVERRIDES.items():
        value = env.get(env_name)
        if value:
            raw[key] = value

    return Settings.from_dict(raw, base_path=config_path.parent)


__all__ = ["Settings", "load_settings", "resolve_config_path"]
