from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    AUTHORIZATION = "authorization"
    ROSTER = "roster"
    OCCUPANCY = "occupancy"
    GENDER_SEGREGATION = "gender_segregation"
    NOT_FOUND = "not_found"
    SHIFT_ASSIGNMENT = "shift_assignment"
    COMPLIANCE = "compliance"
    VALIDATION = "validation"
    ARCHIVE = "archive"


class CareHomeError(RuntimeError):
    """Base application-level error. Subclasses expose their details as attributes."""

    kind: ErrorKind

    def details(self) -> dict[str, Any]:
        return {}


class AuthorizationError(CareHomeError):
    kind = ErrorKind.AUTHORIZATION

    def __init__(self, staff_id: str, action: str, role: str) -> None:
        super().__init__(f"Staff member {staff_id} ({role}) is not authorized to perform action: {action}")
        self.staff_id = staff_id
        self.action = action
        self.role = role

    def details(self) -> dict[str, Any]:
        return {"staff_id": self.staff_id, "action": self.action, "role": self.role}


class RosterViolation(CareHomeError):
    kind = ErrorKind.ROSTER

    def __init__(self, staff_id: str, attempted_at: datetime, role: str) -> None:
        super().__init__(
            f"Staff member {staff_id} ({role}) is not rostered at {attempted_at.isoformat(timespec='minutes')}"
        )
        self.staff_id = staff_id
        self.attempted_at = attempted_at
        self.role = role

    def details(self) -> dict[str, Any]:
        return {"staff_id": self.staff_id, "attempted_at": self.attempted_at, "role": self.role}


class OccupancyConflict(CareHomeError):
    kind = ErrorKind.OCCUPANCY

    def __init__(self, bed_id: str, current_patient_id: str, attempted_patient_id: str) -> None:
        super().__init__(
            f"Bed {bed_id} is already occupied by patient {current_patient_id}. "
            f"Cannot assign patient {attempted_patient_id}"
        )
        self.bed_id = bed_id
        self.current_patient_id = current_patient_id
        self.attempted_patient_id = attempted_patient_id

    def details(self) -> dict[str, Any]:
        return {
            "bed_id": self.bed_id,
            "current_patient_id": self.current_patient_id,
            "attempted_patient_id": self.attempted_patient_id,
        }


class GenderSegregationViolation(CareHomeError):
    kind = ErrorKind.GENDER_SEGREGATION

    def __init__(self, room_id: str, existing_gender: str, attempted_gender: str) -> None:
        super().__init__(
            f"Room {room_id} allows one gender only. Existing: {existing_gender}, Attempted: {attempted_gender}"
        )
        self.room_id = room_id
        self.existing_gender = existing_gender
        self.attempted_gender = attempted_gender

    def details(self) -> dict[str, Any]:
        return {
            "room_id": self.room_id,
            "existing_gender": self.existing_gender,
            "attempted_gender": self.attempted_gender,
        }


class NotFoundError(CareHomeError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: str | None) -> None:
        super().__init__(f"{entity.capitalize()} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

    def details(self) -> dict[str, Any]:
        return {"entity": self.entity, "entity_id": self.entity_id}


class ShiftAssignmentError(CareHomeError):
    kind = ErrorKind.SHIFT_ASSIGNMENT

    def __init__(self, staff_id: str, day: str, slot: str | None, reason: str) -> None:
        super().__init__(f"Cannot assign shift to {staff_id} on {day}: {reason}")
        self.staff_id = staff_id
        self.day = day
        self.slot = slot
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"staff_id": self.staff_id, "day": self.day, "slot": self.slot, "reason": self.reason}


class ComplianceViolation(CareHomeError):
    kind = ErrorKind.COMPLIANCE

    def __init__(self, staff_id: str, rule: str, detail: str, day: str | None = None) -> None:
        super().__init__(detail)
        self.staff_id = staff_id
        self.rule = rule
        self.detail = detail
        self.day = day

    def details(self) -> dict[str, Any]:
        return {"staff_id": self.staff_id, "rule": self.rule, "day": self.day, "detail": self.detail}


class ValidationError(CareHomeError):
    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message}


class ArchiveError(CareHomeError):
    """Raised only when discharge is configured to abort on archive failure."""

    kind = ErrorKind.ARCHIVE

    def __init__(self, patient_id: str, cause: Exception) -> None:
        super().__init__(f"Archiving patient {patient_id} failed: {cause}")
        self.patient_id = patient_id
        self.cause = cause

    def details(self) -> dict[str, Any]:
        return {"patient_id": self.patient_id, "cause": str(self.cause)}
