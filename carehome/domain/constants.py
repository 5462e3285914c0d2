from __future__ import annotations

from enum import StrEnum


class StaffRole(StrEnum):
    DOCTOR = "Doctor"
    NURSE = "Nurse"
    MANAGER = "Manager"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


class Gender(StrEnum):
    MALE = "M"
    FEMALE = "F"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


class Weekday(StrEnum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]

    @classmethod
    def from_index(cls, index: int) -> Weekday:
        """Map ``datetime.weekday()`` (Monday == 0) to a roster day."""
        return list(cls)[index]


WEEKDAY_LABELS: dict[str, str] = {
    "MON": "Monday",
    "TUE": "Tuesday",
    "WED": "Wednesday",
    "THU": "Thursday",
    "FRI": "Friday",
    "SAT": "Saturday",
    "SUN": "Sunday",
}


class ShiftSlot(StrEnum):
    NURSE_MORNING = "8AM-4PM"
    NURSE_AFTERNOON = "2PM-10PM"
    DOCTOR_HOUR = "1HR"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


# slot -> [start_hour, end_hour) on the local wall clock; None means the whole day
SHIFT_HOURS: dict[str, tuple[int, int] | None] = {
    ShiftSlot.NURSE_MORNING.value: (8, 16),
    ShiftSlot.NURSE_AFTERNOON.value: (14, 22),
    ShiftSlot.DOCTOR_HOUR.value: None,
}

ROLE_SLOTS: dict[str, frozenset[str]] = {
    StaffRole.NURSE.value: frozenset({ShiftSlot.NURSE_MORNING.value, ShiftSlot.NURSE_AFTERNOON.value}),
    StaffRole.DOCTOR.value: frozenset({ShiftSlot.DOCTOR_HOUR.value}),
    StaffRole.MANAGER.value: frozenset(),
}

NURSE_HOURS_PER_SHIFT = 8
DOCTOR_HOURS_PER_SHIFT = 1
NURSE_REQUIRED_WEEKLY_SHIFTS = 7
NURSE_MAX_DAILY_HOURS = 8
DOCTOR_REQUIRED_WEEKLY_HOURS = 7

MIN_BEDS_PER_ROOM = 1
MAX_BEDS_PER_ROOM = 4


class AuditAction(StrEnum):
    ADD_STAFF = "ADD_STAFF"
    ADD_PATIENT = "ADD_PATIENT"
    MOVE_PATIENT = "MOVE_PATIENT"
    DISCHARGE_PATIENT = "DISCHARGE_PATIENT"
    ADD_PRESCRIPTION = "ADD_PRESCRIPTION"
    ADMINISTER_MEDICATION = "ADMINISTER_MEDICATION"
    ASSIGN_SHIFT = "ASSIGN_SHIFT"
    REPLACE_SHIFT = "REPLACE_SHIFT"
    CLEAR_SHIFTS = "CLEAR_SHIFTS"
    LOGIN = "LOGIN"
    ACCESS_DENIED = "ACCESS_DENIED"
    SAVE_DATA = "SAVE_DATA"
    LOAD_DATA = "LOAD_DATA"
    CREATE_SAMPLE_DATA = "CREATE_SAMPLE_DATA"


SYSTEM_ACTOR = "SYSTEM"
