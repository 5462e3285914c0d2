from __future__ import annotations

import logging
from pathlib import Path

import pytest

from carehome import main as cli
from carehome.config import settings


@pytest.fixture(autouse=True)
def _restore_root_handlers():
    root_logger = logging.getLogger()
    before = list(root_logger.handlers)
    yield
    for handler in root_logger.handlers[:]:
        if handler not in before:
            root_logger.removeHandler(handler)
            handler.close()


def test_cli_seeds_checks_and_exports(tmp_path: Path, capsys) -> None:
    assert cli.main(["migrate"]) == 0
    assert "up to date" in capsys.readouterr().out

    assert cli.main(["seed"]) == 0
    out = capsys.readouterr().out
    assert "30 beds" in out
    assert str(settings.snapshot_file) in out

    assert cli.main(["check"]) == 0
    assert "compliant" in capsys.readouterr().out

    assert cli.main(["report"]) == 0
    assert "End of Compliance Report" in capsys.readouterr().out

    assert cli.main(["beds"]) == 0
    assert "W1 General Care Ward" in capsys.readouterr().out

    out_file = tmp_path / "report.xlsx"
    assert cli.main(["export-report", "--format", "xlsx", "--out", str(out_file)]) == 0
    assert out_file.exists()


def test_cli_rejects_unknown_command() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["dance"])
