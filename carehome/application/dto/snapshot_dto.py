from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from carehome.application.dto.archive_dto import MedicationRecordSnapshot, PrescriptionSnapshot
from carehome.domain.constants import StaffRole

SNAPSHOT_VERSION = 1


class BedRecord(BaseModel):
    bed_id: str
    patient_id: str | None = None


class RoomRecord(BaseModel):
    room_id: str
    beds: list[BedRecord]


class WardRecord(BaseModel):
    ward_id: str
    name: str
    rooms: list[RoomRecord]


class StaffRecord(BaseModel):
    staff_id: str
    name: str
    email: str = ""
    phone: str = ""
    username: str
    password: str
    role: StaffRole
    qualification: str = ""
    weekly_shifts: dict[str, list[str]] = Field(default_factory=dict)


class PatientRecord(BaseModel):
    patient_id: str
    name: str
    email: str = ""
    phone: str = ""
    date_of_birth: date
    gender: str = Field(..., pattern="^(M|F)$")
    medical_condition: str = ""
    requires_isolation: bool = False
    bed_id: str | None = None
    prescriptions: list[PrescriptionSnapshot] = Field(default_factory=list)
    medication_history: list[MedicationRecordSnapshot] = Field(default_factory=list)


class SnapshotV1(BaseModel):
    version: Literal[1] = 1
    saved_at: datetime
    wards: list[WardRecord]
    staff: list[StaffRecord] = Field(default_factory=list)
    patients: list[PatientRecord] = Field(default_factory=list)
    discharged_patient_ids: list[str] = Field(default_factory=list)
    retired_prescription_ids: list[str] = Field(default_factory=list)
    retired_record_ids: list[str] = Field(default_factory=list)
