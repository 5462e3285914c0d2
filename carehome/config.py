import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, cast

from platformdirs import user_data_dir

APP_NAME = "carehome"
APP_AUTHOR = "carehome"

ArchiveFailurePolicy = Literal["continue", "abort"]
PasswordScheme = Literal["plaintext", "argon2", "bcrypt"]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_archive_policy(name: str, default: ArchiveFailurePolicy) -> ArchiveFailurePolicy:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in {"continue", "abort"}:
        return cast(ArchiveFailurePolicy, raw)
    return default


def _env_password_scheme(name: str, default: PasswordScheme) -> PasswordScheme:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in {"plaintext", "argon2", "bcrypt"}:
        return cast(PasswordScheme, raw)
    return default


def _resolve_data_dir() -> Path:
    env_dir = os.getenv("CAREHOME_DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path(user_data_dir(APP_NAME, APP_AUTHOR))


DATA_DIR = _resolve_data_dir()
LOG_DIR = DATA_DIR / "logs"
REPORT_DIR = DATA_DIR / "reports"
DB_FILE = Path(os.getenv("CAREHOME_DB_FILE") or (DATA_DIR / "app.db"))
SNAPSHOT_FILE = Path(
    os.getenv("CAREHOME_SNAPSHOT_FILE") or (DATA_DIR / "snapshots" / "carehome_snapshot.json")
)

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOG_DIR.mkdir(parents=True, exist_ok=True)
DB_FILE.parent.mkdir(parents=True, exist_ok=True)
SNAPSHOT_FILE.parent.mkdir(parents=True, exist_ok=True)


def default_database_url() -> str:
    # SQLite URL uses forward slashes; as_posix() keeps it cross-platform.
    return f"sqlite:///{DB_FILE.as_posix()}"


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv("DATABASE_URL", default_database_url())
    echo_sql: bool = _env_bool("SQL_ECHO", False)
    snapshot_file: Path = SNAPSHOT_FILE
    archive_failure_policy: ArchiveFailurePolicy = _env_archive_policy(
        "CAREHOME_ARCHIVE_FAILURE_POLICY", "continue"
    )
    password_scheme: PasswordScheme = _env_password_scheme("CAREHOME_PASSWORD_SCHEME", "plaintext")


settings = Settings()
