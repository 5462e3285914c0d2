from __future__ import annotations

from pathlib import Path
from typing import Any

from openpyxl import Workbook
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle

from carehome.application.dto.compliance_dto import ComplianceReport, StaffComplianceEntry
from carehome.application.services.compliance_service import ComplianceService
from carehome.domain.constants import WEEKDAY_LABELS, Weekday
from carehome.infrastructure.reporting.pdf_fonts import get_report_font_name
from carehome.infrastructure.security.checksum import sha256_file

SUMMARY_COLUMNS = [
    "Staff ID",
    "Name",
    "Role",
    "Total shifts",
    "Total hours",
    "Days worked",
    "Status",
    "Reasons",
]


def _day_cell(entry: StaffComplianceEntry, day: str) -> str:
    for assignment in entry.days:
        if assignment.day == day:
            return ", ".join(assignment.slots) if assignment.slots else "-"
    return "-"


def _summary_row(entry: StaffComplianceEntry) -> list[Any]:
    return [
        entry.staff_id,
        entry.name,
        entry.role.value,
        entry.total_shifts,
        entry.total_hours,
        entry.days_worked,
        "COMPLIANT" if entry.compliant else "NON-COMPLIANT",
        "; ".join(entry.reasons),
    ]


class ReportingService:
    def __init__(self, compliance_service: ComplianceService) -> None:
        self.compliance_service = compliance_service

    def export_compliance_xlsx(self, file_path: str | Path) -> dict[str, Any]:
        file_path = Path(file_path)
        report = self.compliance_service.build_report()

        wb = Workbook()
        summary_ws = wb.active
        summary_ws.title = "Summary"
        summary_ws.append(["Report date", report.generated_at.strftime("%Y-%m-%d %H:%M")])
        summary_ws.append(["Overall", "COMPLIANT" if report.compliant else "NON-COMPLIANT"])
        summary_ws.append([])
        summary_ws.append(SUMMARY_COLUMNS)
        for entry in report.entries:
            summary_ws.append(_summary_row(entry))

        roster_ws = wb.create_sheet(title="Roster")
        roster_ws.append(["Staff ID", "Name", *[WEEKDAY_LABELS[day] for day in Weekday.values()]])
        for entry in report.entries:
            roster_ws.append([entry.staff_id, entry.name, *[_day_cell(entry, day) for day in Weekday.values()]])

        file_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(file_path)
        return self._result(file_path, report)

    def export_compliance_pdf(self, file_path: str | Path) -> dict[str, Any]:
        file_path = Path(file_path)
        report = self.compliance_service.build_report()
        font = get_report_font_name()

        header_data = [
            ["Staff shift compliance report", ""],
            ["Report date", report.generated_at.strftime("%Y-%m-%d %H:%M")],
            ["Overall", "COMPLIANT" if report.compliant else "NON-COMPLIANT"],
        ]
        summary_data: list[list[Any]] = [SUMMARY_COLUMNS]
        summary_data.extend([str(cell) for cell in _summary_row(entry)] for entry in report.entries)
        roster_data: list[list[Any]] = [["Staff ID", *Weekday.values()]]
        roster_data.extend(
            [entry.staff_id, *[_day_cell(entry, day) for day in Weekday.values()]] for entry in report.entries
        )

        file_path.parent.mkdir(parents=True, exist_ok=True)
        doc = SimpleDocTemplate(str(file_path), pagesize=A4)
        header_table = Table(header_data)
        header_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, -1), font),
                    ("FONTSIZE", (0, 0), (-1, 0), 12),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                ]
            )
        )
        tables = [header_table]
        for data in (summary_data, roster_data):
            table = Table(data, repeatRows=1)
            table.setStyle(
                TableStyle(
                    [
                        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                        ("FONTNAME", (0, 0), (-1, -1), font),
                        ("FONTSIZE", (0, 0), (-1, -1), 7),
                        ("LEFTPADDING", (0, 0), (-1, -1), 2 * mm),
                        ("RIGHTPADDING", (0, 0), (-1, -1), 2 * mm),
                    ]
                )
            )
            tables.append(table)
        doc.build(tables)
        return self._result(file_path, report)

    def _result(self, file_path: Path, report: ComplianceReport) -> dict[str, Any]:
        return {
            "path": str(file_path),
            "count": len(report.entries),
            "compliant": report.compliant,
            "sha256": sha256_file(file_path),
        }
