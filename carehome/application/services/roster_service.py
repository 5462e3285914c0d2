from __future__ import annotations

from carehome.application.errors import ShiftAssignmentError
from carehome.application.security.guards import AccessGuard
from carehome.domain.constants import WEEKDAY_LABELS, AuditAction, Weekday
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.staff import Staff
from carehome.domain.rules.roster_rules import shift_assignment_problem, weekly_totals
from carehome.infrastructure.audit.audit_journal import AuditJournal


class RosterService:
    """Weekly shift assignments. Only roles holding ``manage_shifts`` may change a roster."""

    def __init__(self, state: CareHomeState, guard: AccessGuard, audit: AuditJournal) -> None:
        self.state = state
        self.guard = guard
        self.audit = audit

    def assign_shift(
        self,
        actor_id: str,
        staff_id: str,
        day: str,
        slot: str,
        replace: bool = False,
    ) -> list[str]:
        self.guard.require_capability(actor_id, "manage_shifts")
        member = self.guard.require_staff(staff_id)
        day = _normalize_day(staff_id, day, slot)

        existing = member.shifts_for_day(day)
        if replace and not existing:
            raise ShiftAssignmentError(staff_id, day, slot, f"No shift on {day} to replace; assign one instead")
        if not replace and existing:
            raise ShiftAssignmentError(
                staff_id, day, slot, f"{day} already has {', '.join(existing)}; use replace to change it"
            )

        if replace:
            problem = shift_assignment_problem(_without_day(member, day), day, slot)
        else:
            problem = shift_assignment_problem(member, day, slot)
        if problem is not None:
            raise ShiftAssignmentError(staff_id, day, slot, problem)

        if replace:
            member.clear_day(day)
        member.add_shift(day, slot)
        action = AuditAction.REPLACE_SHIFT if replace else AuditAction.ASSIGN_SHIFT
        detail = f"{', '.join(existing)} -> {slot}" if replace else slot
        self.audit.log(actor_id, action, f"{member.staff_id} {day}: {detail}")
        return member.shifts_for_day(day)

    def remove_shift(self, actor_id: str, staff_id: str, day: str, slot: str) -> None:
        self.guard.require_capability(actor_id, "manage_shifts")
        member = self.guard.require_staff(staff_id)
        day = _normalize_day(staff_id, day, slot)
        if not member.remove_shift(day, slot):
            raise ShiftAssignmentError(staff_id, day, slot, f"{slot} is not assigned on {day}")
        self.audit.log(actor_id, AuditAction.CLEAR_SHIFTS, f"{member.staff_id} {day}: removed {slot}")

    def clear_day(self, actor_id: str, staff_id: str, day: str) -> None:
        self.guard.require_capability(actor_id, "manage_shifts")
        member = self.guard.require_staff(staff_id)
        day = _normalize_day(staff_id, day, None)
        member.clear_day(day)
        self.audit.log(actor_id, AuditAction.CLEAR_SHIFTS, f"{member.staff_id} {day}: cleared")

    def weekly_totals(self, staff_id: str) -> tuple[int, int]:
        return weekly_totals(self.guard.require_staff(staff_id))

    def roster_of(self, staff_id: str) -> dict[str, list[str]]:
        member = self.guard.require_staff(staff_id)
        return {day: member.shifts_for_day(day) for day in Weekday.values()}


_DAY_ALIASES = {label.upper(): code for code, label in WEEKDAY_LABELS.items()}


def _normalize_day(staff_id: str, day: str, slot: str | None) -> str:
    """Accept a three-letter code or the full day name, in any case."""
    key = day.strip().upper()
    normalized = key if key in WEEKDAY_LABELS else _DAY_ALIASES.get(key)
    if normalized is None:
        raise ShiftAssignmentError(staff_id, day, slot, f"Unknown roster day '{day}'")
    return normalized


def _without_day(member: Staff, day: str) -> Staff:
    shifts = {d: list(slots) for d, slots in member.weekly_shifts.items() if d != day}
    return Staff(
        staff_id=member.staff_id,
        name=member.name,
        email=member.email,
        phone=member.phone,
        username=member.username,
        password=member.password,
        role=member.role,
        qualification=member.qualification,
        weekly_shifts=shifts,
    )
