from __future__ import annotations

import logging
import traceback
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.util import CommandError
from sqlalchemy.exc import SQLAlchemyError

from carehome.container import Container

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = PACKAGE_DIR / "infrastructure" / "db" / "migrations"


def check_startup_prerequisites(db_file: Path) -> bool:
    if not MIGRATIONS_DIR.exists():
        logger.error("Migrations directory is missing: %s", MIGRATIONS_DIR)
        return False
    try:
        test_file = db_file.parent / ".write_test"
        test_file.write_text("ok", encoding="utf-8")
        test_file.unlink(missing_ok=True)
    except OSError:
        logger.exception("No write access to database directory %s", db_file.parent)
        return False
    return True


def build_alembic_config(database_url: str, root_dir: Path | None = None) -> Config:
    ini_path = (root_dir or PACKAGE_DIR.parent) / "alembic.ini"
    cfg = Config(str(ini_path)) if ini_path.exists() else Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", database_url)
    # keep the handlers installed by the CLI
    cfg.attributes["configure_logger"] = False
    return cfg


def run_migrations(database_url: str, log_dir: Path, db_file: Path) -> bool:
    try:
        command.upgrade(build_alembic_config(database_url), "head")
        return True
    except (CommandError, SQLAlchemyError, OSError):
        logger.exception("Failed to run migrations")
        error_path = log_dir / "migration_error.log"
        try:
            error_path.parent.mkdir(parents=True, exist_ok=True)
            with error_path.open("a", encoding="utf-8") as handle:
                handle.write("\n--- Migration error ---\n")
                handle.write(f"DB: {db_file}\n")
                handle.write(f"Migrations: {MIGRATIONS_DIR}\n")
                handle.write(traceback.format_exc())
        except OSError:
            logger.exception("Failed to write migration error log")
        return False


def initialize_database(*, db_file: Path, database_url: str, log_dir: Path) -> bool:
    if not check_startup_prerequisites(db_file):
        return False
    return run_migrations(database_url, log_dir, db_file)


def load_engine_state(container: Container) -> bool:
    """Restore the saved snapshot or seed demo data. Returns True when a snapshot was loaded."""
    try:
        return container.snapshot_service.load_or_seed()
    except ValueError:
        logger.exception("Snapshot %s is unreadable", container.snapshot_service.store.file_path)
        raise
