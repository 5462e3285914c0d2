from __future__ import annotations

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from carehome.application.errors import ComplianceViolation
from carehome.bootstrap.startup import initialize_database, load_engine_state
from carehome.config import DB_FILE, LOG_DIR, REPORT_DIR, settings
from carehome.container import Container, build_container

logger = logging.getLogger(__name__)


def _setup_logging() -> Path:
    log_path = LOG_DIR / "app.log"
    handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(handler)
    return log_path


def _install_exception_hook() -> None:
    def _handle_exception(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).error("Unhandled exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _handle_exception


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="carehome", description="Care home bed, roster and compliance engine")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("seed", help="Load the saved snapshot or create demo data")
    sub.add_parser("beds", help="List available beds")
    sub.add_parser("report", help="Print the weekly compliance report")
    sub.add_parser("check", help="Run the hard compliance check; exit 1 on violation")
    export = sub.add_parser("export-report", help="Export the compliance report")
    export.add_argument("--format", choices=("xlsx", "pdf"), default="xlsx")
    export.add_argument("--out", type=Path, default=None)
    sub.add_parser("migrate", help="Apply database migrations")
    return parser


def _cmd_seed(container: Container, loaded: bool) -> int:
    state = container.state
    origin = "Loaded snapshot" if loaded else "Seeded demo data"
    print(f"{origin}: {len(state.staff)} staff, {len(state.patients)} patients, {state.facility.total_beds} beds")
    print(f"Snapshot file: {container.snapshot_service.store.file_path}")
    return 0


def _cmd_beds(container: Container) -> int:
    beds = container.admission_service.available_beds()
    for summary in container.admission_service.ward_summaries():
        print(f"{summary['ward_id']} {summary['name']}: {summary['available_beds']}/{summary['total_beds']} free")
    for bed in beds:
        print(f"  {bed.bed_id}")
    return 0


def _cmd_check(container: Container) -> int:
    try:
        container.compliance_service.check_compliance()
    except ComplianceViolation as exc:
        print(f"NON-COMPLIANT: {exc.detail}")
        return 1
    print("All staff rosters are compliant")
    return 0


def _cmd_export(container: Container, fmt: str, out: Path | None) -> int:
    out = out or REPORT_DIR / f"compliance_report.{fmt}"
    if fmt == "pdf":
        result = container.reporting_service.export_compliance_pdf(out)
    else:
        result = container.reporting_service.export_compliance_xlsx(out)
    print(f"Report written to {result['path']} (sha256 {result['sha256']})")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging()
    _install_exception_hook()

    if not initialize_database(db_file=DB_FILE, database_url=settings.database_url, log_dir=LOG_DIR):
        print(f"Database initialisation failed; see {LOG_DIR / 'migration_error.log'}", file=sys.stderr)
        return 1
    if args.command == "migrate":
        print("Database is up to date")
        return 0

    container = build_container()
    loaded = load_engine_state(container)

    if args.command == "seed":
        return _cmd_seed(container, loaded)
    if args.command == "beds":
        return _cmd_beds(container)
    if args.command == "report":
        print(container.compliance_service.generate_compliance_report())
        return 0
    if args.command == "check":
        return _cmd_check(container)
    if args.command == "export-report":
        return _cmd_export(container, args.format, args.out)
    return 2


if __name__ == "__main__":
    sys.exit(main())
