"""Settings loaded from environment variables (+ optional .env file)."""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from simpletask.store import STORAGE_KEY

ENV_PREFIX = "SIMPLETASK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


class Settings(BaseModel):
    """Runtime settings for the CLI and the static file server."""

    host: str = "127.0.0.1"
    port: int = 3000
    static_dir: Path = Field(default_factory=lambda: Path("public"))
    data_file: Path = Field(default_factory=lambda: Path("~/.simpletask/storage.json").expanduser())
    storage_key: str = STORAGE_KEY
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def load_settings(*, dotenv: bool = True) -> Settings:
    """Build Settings from the environment.

    A ``.env`` file in the working directory is loaded first when present;
    variables already set in the environment win.
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    defaults = Settings()
    port = _env_int(_k("PORT"), _env_int("PORT", defaults.port))
    return Settings(
        host=_env(_k("HOST"), defaults.host),
        port=port,
        static_dir=Path(_env(_k("STATIC_DIR"), str(defaults.static_dir))).expanduser(),
        data_file=Path(_env(_k("DATA_FILE"), str(defaults.data_file))).expanduser(),
        storage_key=_env(_k("STORAGE_KEY"), defaults.storage_key),
        cors_origins=_env_list(_k("CORS_ORIGINS"), defaults.cors_origins),
        log_level=_env(_k("LOG_LEVEL"), defaults.log_level).upper(),
    )
