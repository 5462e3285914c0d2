from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from carehome.domain.constants import StaffRole


class DayAssignment(BaseModel):
    day: str
    label: str
    slots: list[str] = Field(default_factory=list)
    hours: int = 0

    @property
    def violation(self) -> bool:
        return len(self.slots) > 1


class StaffComplianceEntry(BaseModel):
    staff_id: str
    name: str
    role: StaffRole
    days: list[DayAssignment]
    total_shifts: int
    total_hours: int
    days_worked: int
    violations: list[str] = Field(default_factory=list)
    compliant: bool = True
    reasons: list[str] = Field(default_factory=list)


class ComplianceReport(BaseModel):
    generated_at: datetime
    nurses: list[StaffComplianceEntry] = Field(default_factory=list)
    doctors: list[StaffComplianceEntry] = Field(default_factory=list)

    @property
    def entries(self) -> list[StaffComplianceEntry]:
        return [*self.nurses, *self.doctors]

    @property
    def compliant(self) -> bool:
        return all(entry.compliant for entry in self.entries)
