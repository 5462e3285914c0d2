from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from carehome.domain.models.patient import Patient


class MedicationSnapshot(BaseModel):
    name: str
    dosage: str
    frequency: str
    administration_time: str = ""
    instructions: str = ""


class PrescriptionSnapshot(BaseModel):
    prescription_id: str
    doctor_id: str
    created_at: datetime
    notes: str = ""
    medications: list[MedicationSnapshot] = Field(default_factory=list)


class MedicationRecordSnapshot(BaseModel):
    record_id: str
    nurse_id: str
    medication_name: str
    dosage_given: str
    administered_at: datetime
    notes: str = ""
    administered: bool


class PatientArchiveSnapshot(BaseModel):
    patient_id: str
    name: str
    email: str
    phone: str
    date_of_birth: date
    gender: str
    age: int
    medical_condition: str
    requires_isolation: bool
    bed_id: str | None
    prescriptions: list[PrescriptionSnapshot] = Field(default_factory=list)
    medication_history: list[MedicationRecordSnapshot] = Field(default_factory=list)

    @classmethod
    def from_patient(cls, patient: Patient, today: date | None = None) -> PatientArchiveSnapshot:
        return cls(
            patient_id=patient.patient_id,
            name=patient.name,
            email=patient.email,
            phone=patient.phone,
            date_of_birth=patient.date_of_birth,
            gender=patient.gender,
            age=patient.age(today),
            medical_condition=patient.medical_condition,
            requires_isolation=patient.requires_isolation,
            bed_id=patient.bed_id,
            prescriptions=[
                PrescriptionSnapshot(
                    prescription_id=p.prescription_id,
                    doctor_id=p.doctor_id,
                    created_at=p.created_at,
                    notes=p.notes,
                    medications=[
                        MedicationSnapshot(
                            name=m.name,
                            dosage=m.dosage,
                            frequency=m.frequency,
                            administration_time=m.administration_time,
                            instructions=m.instructions,
                        )
                        for m in p.medications
                    ],
                )
                for p in patient.prescriptions
            ],
            medication_history=[
                MedicationRecordSnapshot(
                    record_id=r.record_id,
                    nurse_id=r.nurse_id,
                    medication_name=r.medication_name,
                    dosage_given=r.dosage_given,
                    administered_at=r.administered_at,
                    notes=r.notes,
                    administered=r.administered,
                )
                for r in patient.medication_history
            ],
        )


class DischargedPatientResponse(BaseModel):
    patient: PatientArchiveSnapshot
    discharge_date: datetime
    discharge_reason: str | None = None
    discharge_notes: str | None = None
    discharged_by: str
