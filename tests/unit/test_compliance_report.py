from __future__ import annotations

import pytest

from carehome.application.errors import ComplianceViolation
from carehome.application.services.compliance_service import ComplianceService
from carehome.domain.constants import ShiftSlot, StaffRole
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.rules.roster_rules import RULE_MULTIPLE_SHIFTS_PER_DAY, RULE_WEEKLY_HOURS_INSUFFICIENT
from carehome_fixtures import MONDAY_MORNING, FixedClock, make_staff

MORNING = ShiftSlot.NURSE_MORNING.value
AFTERNOON = ShiftSlot.NURSE_AFTERNOON.value


def _service(*members) -> ComplianceService:
    state = CareHomeState()
    for member in members:
        state.staff.add(member)
    return ComplianceService(state, clock=FixedClock(MONDAY_MORNING))


def test_fully_rostered_staff_pass_check_and_report() -> None:
    service = _service(
        make_staff("MGR001", StaffRole.MANAGER),
        make_staff("DOC001", StaffRole.DOCTOR, ShiftSlot.DOCTOR_HOUR.value),
        make_staff("NUR001", StaffRole.NURSE, MORNING),
    )

    service.check_compliance()
    report = service.build_report()
    assert report.compliant is True
    assert [entry.staff_id for entry in report.entries] == ["NUR001", "DOC001"]

    text = service.generate_compliance_report()
    assert text.startswith("=" * 78 + "\nSTAFF SHIFT COMPLIANCE REPORT\nGenerated: 2026-10-19 10:00")
    assert "  Monday: 8AM-4PM (8 hours)" in text
    assert "  Total Shifts: 7 / 7 required" in text
    assert "  Days Worked: 7 / 7 required" in text
    assert "  Sunday: 1 hour" in text
    assert "Status: NON-COMPLIANT" not in text
    assert text.rstrip().endswith("End of Compliance Report")


def test_report_flags_double_shift_and_missing_days() -> None:
    nurse = make_staff("NUR002", StaffRole.NURSE, MORNING)
    nurse.clear_day("SUN")
    nurse.add_shift("TUE", AFTERNOON)
    doctor = make_staff("DOC002", StaffRole.DOCTOR)
    doctor.add_shift("MON", ShiftSlot.DOCTOR_HOUR.value)

    report = _service(nurse, doctor).build_report()
    nurse_entry, doctor_entry = report.entries

    assert nurse_entry.violations == ["TUE"]
    assert nurse_entry.total_shifts == 7
    assert nurse_entry.reasons == ["Multiple shifts per day"]
    assert doctor_entry.days_worked == 1
    assert doctor_entry.reasons == ["Insufficient hours", "Not working all 7 days"]
    assert report.compliant is False

    text = _service(nurse, doctor).generate_compliance_report()
    assert "  Tuesday: VIOLATION - Multiple shifts: 8AM-4PM, 2PM-10PM" in text
    assert "  Sunday: No shift assigned" in text
    assert "  Status: NON-COMPLIANT (Multiple shifts per day)" in text
    assert "  Status: NON-COMPLIANT (Insufficient hours) (Not working all 7 days)" in text


def test_nurse_short_of_shifts_reports_wrong_count() -> None:
    nurse = make_staff("NUR003", StaffRole.NURSE)
    nurse.add_shift("MON", MORNING)
    entry = _service(nurse).build_report().nurses[0]
    assert entry.reasons == ["Wrong number of shifts"]
    assert entry.total_hours == 8


def test_check_raises_first_violation_in_directory_order() -> None:
    nurse = make_staff("NUR001", StaffRole.NURSE, MORNING)
    nurse.clear_day("SUN")
    nurse.add_shift("WED", AFTERNOON)
    doctor = make_staff("DOC001", StaffRole.DOCTOR)

    with pytest.raises(ComplianceViolation) as exc_info:
        _service(nurse, doctor).check_compliance()
    assert exc_info.value.staff_id == "NUR001"
    assert exc_info.value.rule == RULE_MULTIPLE_SHIFTS_PER_DAY
    assert exc_info.value.day == "WED"

    with pytest.raises(ComplianceViolation) as exc_info:
        _service(doctor).check_compliance()
    assert exc_info.value.rule == RULE_WEEKLY_HOURS_INSUFFICIENT


def test_report_is_deterministic_for_fixed_clock() -> None:
    members = (make_staff("NUR001", StaffRole.NURSE, AFTERNOON), make_staff("DOC001", StaffRole.DOCTOR))
    service = _service(*members)
    assert service.generate_compliance_report() == service.generate_compliance_report()


def test_doctor_day_with_two_slots_is_flagged() -> None:
    doctor = make_staff("DOC003", StaffRole.DOCTOR, ShiftSlot.DOCTOR_HOUR.value)
    doctor.add_shift("MON", ShiftSlot.DOCTOR_HOUR.value)

    service = _service(doctor)
    entry = service.build_report().doctors[0]
    assert entry.violations == ["MON"]
    assert entry.total_hours == 8
    assert entry.compliant is True

    text = service.generate_compliance_report()
    assert "  Monday: VIOLATION - Multiple shifts: 1HR, 1HR (2 hours)" in text
    assert "  Tuesday: 1 hour" in text
