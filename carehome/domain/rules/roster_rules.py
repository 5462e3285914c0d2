from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from carehome.domain.constants import (
    DOCTOR_HOURS_PER_SHIFT,
    DOCTOR_REQUIRED_WEEKLY_HOURS,
    NURSE_HOURS_PER_SHIFT,
    NURSE_MAX_DAILY_HOURS,
    NURSE_REQUIRED_WEEKLY_SHIFTS,
    ROLE_SLOTS,
    SHIFT_HOURS,
    StaffRole,
    Weekday,
)
from carehome.domain.models.staff import Staff

RULE_WEEKLY_SHIFT_TOTAL = "weekly_shift_total"
RULE_MULTIPLE_SHIFTS_PER_DAY = "multiple_shifts_per_day"
RULE_DAILY_HOURS_EXCEEDED = "daily_hours_exceeded"
RULE_WEEKLY_HOURS_INSUFFICIENT = "weekly_hours_insufficient"
RULE_MISSING_DAY = "missing_day"


@dataclass(frozen=True, slots=True)
class ComplianceFinding:
    staff_id: str
    rule: str
    detail: str
    day: str | None = None


def roster_day(moment: datetime) -> str:
    return Weekday.from_index(moment.weekday()).value


def hours_per_shift(role: StaffRole) -> int:
    if role == StaffRole.NURSE:
        return NURSE_HOURS_PER_SHIFT
    if role == StaffRole.DOCTOR:
        return DOCTOR_HOURS_PER_SHIFT
    return 0


def slot_covers_hour(slot: str, hour: int) -> bool:
    if slot not in SHIFT_HOURS:
        return False
    window = SHIFT_HOURS[slot]
    if window is None:
        return True
    start, end = window
    return start <= hour < end


def is_rostered_at(staff: Staff, moment: datetime) -> bool:
    if staff.role == StaffRole.MANAGER:
        return True
    return any(slot_covers_hour(slot, moment.hour) for slot in staff.shifts_for_day(roster_day(moment)))


def shift_assignment_problem(staff: Staff, day: str, slot: str) -> str | None:
    """Return why ``slot`` cannot be added to ``day`` for ``staff``, or None when it can."""
    if day not in Weekday.values():
        return f"Unknown roster day '{day}'; expected one of {', '.join(Weekday.values())}"
    allowed = ROLE_SLOTS[staff.role.value]
    if not allowed:
        return f"{staff.role.value} staff are always on duty and cannot be rostered"
    if slot not in allowed:
        return f"{staff.role.value} can only be assigned {' or '.join(sorted(allowed))} shifts"
    existing = staff.shifts_for_day(day)
    if slot in existing:
        return f"{slot} is already assigned on {day}"
    if existing:
        return f"{staff.role.value} can only have one shift per day; {day} already has {', '.join(existing)}"
    return None


def weekly_totals(staff: Staff) -> tuple[int, int]:
    shifts = staff.total_weekly_shifts()
    return shifts, shifts * hours_per_shift(staff.role)


def find_compliance_violation(staff: Staff) -> ComplianceFinding | None:
    if staff.role == StaffRole.NURSE:
        return _nurse_violation(staff)
    if staff.role == StaffRole.DOCTOR:
        return _doctor_violation(staff)
    return None


def _nurse_violation(staff: Staff) -> ComplianceFinding | None:
    total = staff.total_weekly_shifts()
    if total != NURSE_REQUIRED_WEEKLY_SHIFTS:
        return ComplianceFinding(
            staff_id=staff.staff_id,
            rule=RULE_WEEKLY_SHIFT_TOTAL,
            detail=(
                f"Nurse {staff.staff_id} has {total} shifts assigned; "
                f"exactly {NURSE_REQUIRED_WEEKLY_SHIFTS} required"
            ),
        )
    for day in Weekday.values():
        count = len(staff.shifts_for_day(day))
        if count > 1:
            return ComplianceFinding(
                staff_id=staff.staff_id,
                rule=RULE_MULTIPLE_SHIFTS_PER_DAY,
                day=day,
                detail=f"Nurse {staff.staff_id} has {count} shifts on {day}",
            )
        daily = staff.daily_hours(day, NURSE_HOURS_PER_SHIFT)
        if daily > NURSE_MAX_DAILY_HOURS:
            return ComplianceFinding(
                staff_id=staff.staff_id,
                rule=RULE_DAILY_HOURS_EXCEEDED,
                day=day,
                detail=f"Nurse {staff.staff_id} works {daily} hours on {day}",
            )
    return None


def _doctor_violation(staff: Staff) -> ComplianceFinding | None:
    hours = staff.total_weekly_hours(DOCTOR_HOURS_PER_SHIFT)
    if hours < DOCTOR_REQUIRED_WEEKLY_HOURS:
        return ComplianceFinding(
            staff_id=staff.staff_id,
            rule=RULE_WEEKLY_HOURS_INSUFFICIENT,
            detail=(
                f"Doctor {staff.staff_id} has {hours} hours assigned; "
                f"at least {DOCTOR_REQUIRED_WEEKLY_HOURS} required"
            ),
        )
    for day in Weekday.values():
        if not staff.shifts_for_day(day):
            return ComplianceFinding(
                staff_id=staff.staff_id,
                rule=RULE_MISSING_DAY,
                day=day,
                detail=f"Doctor {staff.staff_id} has no shift on {day}",
            )
    return None
