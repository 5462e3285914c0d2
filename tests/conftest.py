from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path
from uuid import uuid4

import pytest

# Must be set before any carehome module resolves its data directory.
os.environ.setdefault("CAREHOME_DATA_DIR", tempfile.mkdtemp(prefix="carehome-tests-"))

from carehome.container import Container, build_container  # noqa: E402
from carehome.infrastructure.archive.discharge_archive import InMemoryDischargeArchive  # noqa: E402
from carehome.infrastructure.audit.audit_journal import InMemoryAuditJournal  # noqa: E402
from carehome_fixtures import MONDAY_MORNING, FixedClock, add_core_staff  # noqa: E402


@pytest.fixture
def tmp_path() -> Generator[Path, None, None]:
    base = Path("pytest_artifacts")
    base.mkdir(parents=True, exist_ok=True)
    path = base / uuid4().hex
    path.mkdir(parents=True, exist_ok=True)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(MONDAY_MORNING)


@pytest.fixture
def audit() -> InMemoryAuditJournal:
    return InMemoryAuditJournal()


@pytest.fixture
def archive(clock: FixedClock) -> InMemoryDischargeArchive:
    return InMemoryDischargeArchive(clock=clock)


@pytest.fixture
def container(
    tmp_path: Path,
    clock: FixedClock,
    audit: InMemoryAuditJournal,
    archive: InMemoryDischargeArchive,
) -> Container:
    """Engine wired with in-memory collaborators, a pinned clock and MGR001/DOC001/NUR001 on staff."""
    built = build_container(
        audit=audit,
        archive=archive,
        snapshot_file=tmp_path / "snapshot.json",
        archive_failure_policy="continue",
        password_scheme="plaintext",
        clock=clock,
    )
    add_core_staff(built)
    return built
