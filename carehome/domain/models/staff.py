from __future__ import annotations

from dataclasses import dataclass, field

from carehome.domain.constants import StaffRole, Weekday


@dataclass(slots=True)
class Staff:
    staff_id: str
    name: str
    email: str
    phone: str
    username: str
    password: str
    role: StaffRole
    # Doctor specialization or nurse certification; unused for managers.
    qualification: str = ""
    weekly_shifts: dict[str, list[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.role = StaffRole(self.role)

    def shifts_for_day(self, day: str) -> list[str]:
        return list(self.weekly_shifts.get(day, []))

    def add_shift(self, day: str, slot: str) -> None:
        self.weekly_shifts.setdefault(day, []).append(slot)

    def remove_shift(self, day: str, slot: str) -> bool:
        shifts = self.weekly_shifts.get(day)
        if not shifts or slot not in shifts:
            return False
        shifts.remove(slot)
        return True

    def clear_day(self, day: str) -> None:
        if day in self.weekly_shifts:
            self.weekly_shifts[day].clear()

    def total_weekly_shifts(self) -> int:
        return sum(len(self.weekly_shifts.get(day, [])) for day in Weekday.values())

    def daily_hours(self, day: str, hours_per_shift: int) -> int:
        return len(self.weekly_shifts.get(day, [])) * hours_per_shift

    def total_weekly_hours(self, hours_per_shift: int) -> int:
        return self.total_weekly_shifts() * hours_per_shift


class StaffDirectory:
    def __init__(self, members: list[Staff] | None = None) -> None:
        self._members: dict[str, Staff] = {}
        for staff in members or []:
            self.add(staff)

    def __contains__(self, staff_id: object) -> bool:
        return staff_id in self._members

    def __len__(self) -> int:
        return len(self._members)

    def get(self, staff_id: str) -> Staff | None:
        return self._members.get(staff_id)

    def list(self, role: StaffRole | None = None) -> list[Staff]:
        if role is None:
            return list(self._members.values())
        return [staff for staff in self._members.values() if staff.role == role]

    def find_by_username(self, username: str) -> Staff | None:
        return next((staff for staff in self._members.values() if staff.username == username), None)

    def add(self, staff: Staff) -> None:
        if staff.staff_id in self._members:
            raise ValueError(f"Staff {staff.staff_id} already exists")
        if self.find_by_username(staff.username) is not None:
            raise ValueError(f"Username {staff.username} is already taken")
        self._members[staff.staff_id] = staff
