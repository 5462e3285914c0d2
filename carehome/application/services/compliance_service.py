from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from carehome.application.dto.compliance_dto import ComplianceReport, DayAssignment, StaffComplianceEntry
from carehome.application.errors import ComplianceViolation
from carehome.domain.constants import (
    DOCTOR_REQUIRED_WEEKLY_HOURS,
    NURSE_REQUIRED_WEEKLY_SHIFTS,
    WEEKDAY_LABELS,
    StaffRole,
    Weekday,
)
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.staff import Staff
from carehome.domain.rules.roster_rules import find_compliance_violation, hours_per_shift

RULE_LINE = "=" * 78
ENTRY_LINE = "-" * 78


class ComplianceService:
    def __init__(self, state: CareHomeState, clock: Callable[[], datetime] = datetime.now) -> None:
        self.state = state
        self.clock = clock

    def check_compliance(self) -> None:
        """Raise ``ComplianceViolation`` for the first broken rule, walking staff in directory order."""
        for member in self.state.staff.list():
            finding = find_compliance_violation(member)
            if finding is not None:
                raise ComplianceViolation(finding.staff_id, finding.rule, finding.detail, finding.day)

    def build_report(self) -> ComplianceReport:
        return ComplianceReport(
            generated_at=self.clock(),
            nurses=[_entry(member) for member in self.state.staff.list(StaffRole.NURSE)],
            doctors=[_entry(member) for member in self.state.staff.list(StaffRole.DOCTOR)],
        )

    def generate_compliance_report(self) -> str:
        return render_compliance_report(self.build_report())


def _entry(member: Staff) -> StaffComplianceEntry:
    per_shift = hours_per_shift(member.role)
    days = [
        DayAssignment(
            day=day,
            label=WEEKDAY_LABELS[day],
            slots=member.shifts_for_day(day),
            hours=len(member.shifts_for_day(day)) * per_shift,
        )
        for day in Weekday.values()
    ]
    total_shifts = sum(len(d.slots) for d in days)
    total_hours = sum(d.hours for d in days)
    days_worked = sum(1 for d in days if d.slots)
    violations = [d.day for d in days if d.violation]
    reasons: list[str] = []

    if member.role == StaffRole.NURSE:
        if total_shifts != NURSE_REQUIRED_WEEKLY_SHIFTS:
            reasons.append("Wrong number of shifts")
        if violations:
            reasons.append("Multiple shifts per day")
    else:
        # Doctors are flagged per day; their verdict follows the hours and coverage rules only.
        if total_hours < DOCTOR_REQUIRED_WEEKLY_HOURS:
            reasons.append("Insufficient hours")
        if days_worked < len(days):
            reasons.append("Not working all 7 days")

    return StaffComplianceEntry(
        staff_id=member.staff_id,
        name=member.name,
        role=member.role,
        days=days,
        total_shifts=total_shifts,
        total_hours=total_hours,
        days_worked=days_worked,
        violations=violations,
        compliant=not reasons,
        reasons=reasons,
    )


def _status_line(entry: StaffComplianceEntry) -> str:
    if entry.compliant:
        return "  Status: COMPLIANT"
    return "  Status: NON-COMPLIANT " + " ".join(f"({reason})" for reason in entry.reasons)


def render_compliance_report(report: ComplianceReport) -> str:
    lines = [
        RULE_LINE,
        "STAFF SHIFT COMPLIANCE REPORT",
        f"Generated: {report.generated_at.strftime('%Y-%m-%d %H:%M')}",
        RULE_LINE,
        "",
        f"NURSES - Required: {NURSE_REQUIRED_WEEKLY_SHIFTS} shifts per week (one 8-hour shift per day)",
        ENTRY_LINE,
    ]
    for entry in report.nurses:
        lines.append(f"{entry.name} ({entry.staff_id})")
        for day in entry.days:
            if not day.slots:
                text = "No shift assigned"
            elif day.violation:
                text = "VIOLATION - Multiple shifts: " + ", ".join(day.slots)
            else:
                text = f"{day.slots[0]} ({day.hours} hours)"
            lines.append(f"  {day.label}: {text}")
        lines.append(f"  Total Shifts: {entry.total_shifts} / {NURSE_REQUIRED_WEEKLY_SHIFTS} required")
        lines.append(f"  Total Hours: {entry.total_hours} hours")
        lines.append(_status_line(entry))
        lines.append(ENTRY_LINE)

    lines.extend(
        [
            "",
            f"DOCTORS - Required: Minimum {DOCTOR_REQUIRED_WEEKLY_HOURS} hours per week (at least 1 hour per day)",
            ENTRY_LINE,
        ]
    )
    for entry in report.doctors:
        lines.append(f"{entry.name} ({entry.staff_id})")
        for day in entry.days:
            if not day.slots:
                text = "No shift assigned"
            elif day.violation:
                text = f"VIOLATION - Multiple shifts: {', '.join(day.slots)} ({day.hours} hours)"
            else:
                text = f"{day.hours} hour" + ("s" if day.hours > 1 else "")
            lines.append(f"  {day.label}: {text}")
        lines.append(f"  Days Worked: {entry.days_worked} / 7 required")
        lines.append(f"  Total Hours: {entry.total_hours} / {DOCTOR_REQUIRED_WEEKLY_HOURS} minimum required")
        lines.append(_status_line(entry))
        lines.append(ENTRY_LINE)

    lines.extend(["", "End of Compliance Report", ""])
    return "\n".join(lines)
