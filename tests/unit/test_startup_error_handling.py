from __future__ import annotations

from pathlib import Path

import pytest
from alembic.util.exc import CommandError
from sqlalchemy import create_engine, inspect

from carehome.bootstrap import startup


def test_check_startup_prerequisites_handles_write_error(tmp_path: Path, monkeypatch) -> None:
    db_file = tmp_path / "data" / "carehome.db"
    db_file.parent.mkdir(parents=True, exist_ok=True)

    original_write_text = Path.write_text

    def _failing_write(self: Path, data: str, encoding: str = "utf-8", errors: str | None = None) -> int:
        if self.name == ".write_test":
            raise OSError("permission denied")
        kwargs = {"encoding": encoding}
        if errors is not None:
            kwargs["errors"] = errors
        return original_write_text(self, data, **kwargs)

    monkeypatch.setattr(Path, "write_text", _failing_write)

    assert startup.check_startup_prerequisites(db_file) is False


def test_check_startup_prerequisites_requires_migrations_dir(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(startup, "MIGRATIONS_DIR", tmp_path / "missing")
    assert startup.check_startup_prerequisites(tmp_path / "carehome.db") is False


def test_run_migrations_writes_error_log_when_upgrade_fails(tmp_path: Path, monkeypatch) -> None:
    db_file = tmp_path / "carehome.db"
    log_dir = tmp_path / "logs"

    def _raise_upgrade(_cfg, _target: str) -> None:  # noqa: ANN001
        raise CommandError("boom")

    monkeypatch.setattr(startup.command, "upgrade", _raise_upgrade)

    assert startup.run_migrations("sqlite:///unused.db", log_dir, db_file) is False

    error_log = log_dir / "migration_error.log"
    assert error_log.exists()
    log_text = error_log.read_text(encoding="utf-8")
    assert "Migration error" in log_text
    assert "boom" in log_text


def test_build_alembic_config_points_at_package_migrations(tmp_path: Path) -> None:
    cfg = startup.build_alembic_config("sqlite:///x.db", root_dir=tmp_path)
    assert cfg.get_main_option("script_location") == str(startup.MIGRATIONS_DIR)
    assert cfg.get_main_option("sqlalchemy.url") == "sqlite:///x.db"
    assert cfg.attributes["configure_logger"] is False


@pytest.mark.parametrize("runs", [1, 2])
def test_initialize_database_creates_archive_and_audit_tables(tmp_path: Path, runs: int) -> None:
    db_file = tmp_path / "carehome.db"
    database_url = f"sqlite:///{db_file.as_posix()}"

    for _ in range(runs):
        assert startup.initialize_database(db_file=db_file, database_url=database_url, log_dir=tmp_path) is True

    tables = set(inspect(create_engine(database_url)).get_table_names())
    assert {
        "audit_log",
        "discharged_patients",
        "archived_prescriptions",
        "archived_medications",
        "archived_medication_records",
        "alembic_version",
    } <= tables
