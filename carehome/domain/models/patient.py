from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(slots=True, frozen=True)
class Medication:
    name: str
    dosage: str
    frequency: str
    administration_time: str = ""
    instructions: str = ""


@dataclass(slots=True)
class Prescription:
    prescription_id: str
    patient_id: str
    doctor_id: str
    notes: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    medications: list[Medication] = field(default_factory=list)

    def add_medication(self, medication: Medication) -> None:
        self.medications.append(medication)


@dataclass(slots=True)
class MedicationRecord:
    record_id: str
    patient_id: str
    nurse_id: str
    medication_name: str
    dosage_given: str
    administered_at: datetime = field(default_factory=datetime.now)
    notes: str = ""
    administered: bool = False


@dataclass(slots=True)
class Patient:
    patient_id: str
    name: str
    email: str
    phone: str
    date_of_birth: date
    gender: str
    medical_condition: str = ""
    requires_isolation: bool = False
    bed_id: str | None = None
    prescriptions: list[Prescription] = field(default_factory=list)
    medication_history: list[MedicationRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.gender = self.gender.upper()

    def age(self, today: date | None = None) -> int:
        today = today or date.today()
        years = today.year - self.date_of_birth.year
        if (today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day):
            years -= 1
        return years

    def add_prescription(self, prescription: Prescription) -> None:
        self.prescriptions.append(prescription)

    def add_medication_record(self, record: MedicationRecord) -> None:
        self.medication_history.append(record)


class PatientRegistry:
    """Active patients keyed by id, in admission order.

    Discharged ids are remembered so an id is never reused for a new active record.
    Prescription and medication record ids of discharged patients are kept too,
    since the archive keys those rows across every patient.
    """

    def __init__(
        self,
        patients: list[Patient] | None = None,
        discharged_ids: set[str] | None = None,
        retired_prescription_ids: set[str] | None = None,
        retired_record_ids: set[str] | None = None,
    ) -> None:
        self._patients: dict[str, Patient] = {}
        self._discharged: set[str] = set(discharged_ids or ())
        self._retired_prescriptions: set[str] = set(retired_prescription_ids or ())
        self._retired_records: set[str] = set(retired_record_ids or ())
        for patient in patients or []:
            self.add(patient)

    def __contains__(self, patient_id: object) -> bool:
        return patient_id in self._patients

    def __len__(self) -> int:
        return len(self._patients)

    def get(self, patient_id: str) -> Patient | None:
        return self._patients.get(patient_id)

    def list(self) -> list[Patient]:
        return list(self._patients.values())

    def add(self, patient: Patient) -> None:
        if patient.patient_id in self._patients:
            raise ValueError(f"Patient {patient.patient_id} is already registered")
        self._patients[patient.patient_id] = patient

    def remove(self, patient_id: str) -> Patient:
        patient = self._patients.pop(patient_id)
        self._discharged.add(patient_id)
        self._retired_prescriptions.update(p.prescription_id for p in patient.prescriptions)
        self._retired_records.update(r.record_id for r in patient.medication_history)
        return patient

    def was_discharged(self, patient_id: str) -> bool:
        return patient_id in self._discharged

    @property
    def discharged_ids(self) -> set[str]:
        return set(self._discharged)

    @property
    def retired_prescription_ids(self) -> set[str]:
        return set(self._retired_prescriptions)

    @property
    def retired_record_ids(self) -> set[str]:
        return set(self._retired_records)

    def prescription_id_in_use(self, prescription_id: str) -> bool:
        if prescription_id in self._retired_prescriptions:
            return True
        return any(
            p.prescription_id == prescription_id for patient in self._patients.values() for p in patient.prescriptions
        )

    def record_id_in_use(self, record_id: str) -> bool:
        if record_id in self._retired_records:
            return True
        return any(
            r.record_id == record_id for patient in self._patients.values() for r in patient.medication_history
        )
