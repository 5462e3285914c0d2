from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from carehome.domain.models.patient import Medication, MedicationRecord, Patient, Prescription
from carehome.domain.rules.validation import (
    format_name,
    is_valid_dosage,
    is_valid_email,
    is_valid_id,
    is_valid_phone,
)


def new_record_id(prefix: str) -> str:
    return f"{prefix}{uuid4().hex[:7].upper()}"


class PatientAdmissionRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    patient_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str = ""
    phone: str = ""
    date_of_birth: date
    gender: str = Field(..., pattern="^(M|F|m|f)$")
    medical_condition: str = ""
    requires_isolation: bool = False

    @field_validator("patient_id")
    @classmethod
    def _validate_patient_id(cls, v: str) -> str:
        if not is_valid_id(v):
            raise ValueError("Patient id must be 3-10 letters or digits")
        return v.upper()

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, v: str) -> str:
        return format_name(v)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        if v and not is_valid_email(v):
            raise ValueError("Invalid email address")
        return v

    @field_validator("phone")
    @classmethod
    def _validate_phone(cls, v: str) -> str:
        if v and not is_valid_phone(v):
            raise ValueError("Phone must be 10-15 digits")
        return v

    @field_validator("gender")
    @classmethod
    def _upper_gender(cls, v: str) -> str:
        return v.upper()

    @field_validator("date_of_birth")
    @classmethod
    def _validate_dob(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v

    def to_patient(self) -> Patient:
        return Patient(
            patient_id=self.patient_id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            date_of_birth=self.date_of_birth,
            gender=self.gender,
            medical_condition=self.medical_condition,
            requires_isolation=self.requires_isolation,
        )


class MedicationInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    dosage: str = Field(..., min_length=1)
    frequency: str = Field(..., min_length=1)
    administration_time: str = ""
    instructions: str = ""

    @field_validator("dosage")
    @classmethod
    def _validate_dosage(cls, v: str) -> str:
        if not is_valid_dosage(v):
            raise ValueError("Dosage must be a number followed by a unit (mg, g, ml, units, tablets, pills)")
        return v

    def to_medication(self) -> Medication:
        return Medication(
            name=self.name,
            dosage=self.dosage,
            frequency=self.frequency,
            administration_time=self.administration_time,
            instructions=self.instructions,
        )


class PrescriptionRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    prescription_id: str = Field(default_factory=lambda: new_record_id("RX"))
    notes: str = ""
    medications: list[MedicationInput] = Field(..., min_length=1)

    def to_prescription(self, patient_id: str, doctor_id: str) -> Prescription:
        return Prescription(
            prescription_id=self.prescription_id,
            patient_id=patient_id,
            doctor_id=doctor_id,
            notes=self.notes,
            medications=[item.to_medication() for item in self.medications],
        )


class MedicationAdministrationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    record_id: str = Field(default_factory=lambda: new_record_id("MR"))
    medication_name: str = Field(..., min_length=1)
    dosage_given: str = Field(..., min_length=1)
    notes: str = ""
    administered_at: datetime | None = None

    def to_record(self, patient_id: str, nurse_id: str) -> MedicationRecord:
        record = MedicationRecord(
            record_id=self.record_id,
            patient_id=patient_id,
            nurse_id=nurse_id,
            medication_name=self.medication_name,
            dosage_given=self.dosage_given,
            notes=self.notes,
        )
        if self.administered_at is not None:
            record.administered_at = self.administered_at
        return record


class BedResponse(BaseModel):
    bed_id: str
    room_id: str
    ward_id: str
    occupied: bool
    patient_id: str | None = None
