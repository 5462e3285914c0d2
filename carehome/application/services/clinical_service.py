from __future__ import annotations

from carehome.application.dto.patient_dto import MedicationAdministrationRequest, PrescriptionRequest
from carehome.application.errors import NotFoundError, ValidationError
from carehome.application.security.guards import AccessGuard
from carehome.domain.constants import AuditAction
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.patient import MedicationRecord, Patient, Prescription
from carehome.infrastructure.audit.audit_journal import AuditJournal


class ClinicalService:
    def __init__(self, state: CareHomeState, guard: AccessGuard, audit: AuditJournal) -> None:
        self.state = state
        self.guard = guard
        self.audit = audit

    def add_prescription(
        self,
        patient_id: str,
        prescription: Prescription | PrescriptionRequest,
        doctor_id: str,
    ) -> Prescription:
        member = self.guard.require_capability(doctor_id, "add_prescription")
        now = self.guard.require_rostered(member)
        patient = self._require_patient(patient_id)
        if isinstance(prescription, PrescriptionRequest):
            prescription = prescription.to_prescription(patient_id, doctor_id)
            prescription.created_at = now
        if not prescription.medications:
            raise ValidationError("medications", "A prescription needs at least one medication")
        if self.state.patients.prescription_id_in_use(prescription.prescription_id):
            raise ValidationError("prescription_id", f"Prescription {prescription.prescription_id} already exists")
        prescription.patient_id = patient_id

        patient.add_prescription(prescription)
        self.audit.log(
            doctor_id,
            AuditAction.ADD_PRESCRIPTION,
            f"Added prescription {prescription.prescription_id} for patient {patient.name}",
        )
        return prescription

    def administer_medication(
        self,
        patient_id: str,
        record: MedicationRecord | MedicationAdministrationRequest,
        nurse_id: str,
    ) -> MedicationRecord:
        member = self.guard.require_capability(nurse_id, "administer_medication")
        now = self.guard.require_rostered(member)
        patient = self._require_patient(patient_id)
        if isinstance(record, MedicationAdministrationRequest):
            explicit_time = record.administered_at is not None
            record = record.to_record(patient_id, nurse_id)
            if not explicit_time:
                record.administered_at = now
        if self.state.patients.record_id_in_use(record.record_id):
            raise ValidationError("record_id", f"Medication record {record.record_id} already exists")
        record.patient_id = patient_id
        record.administered = True

        patient.add_medication_record(record)
        self.audit.log(
            nurse_id,
            AuditAction.ADMINISTER_MEDICATION,
            f"Administered {record.medication_name} to patient {patient.name}",
        )
        return record

    def view_patient(self, patient_id: str, staff_id: str) -> Patient:
        self.guard.require_capability(staff_id, "check_patient")
        return self._require_patient(patient_id)

    def list_patients(self, staff_id: str) -> list[Patient]:
        self.guard.require_capability(staff_id, "check_patient")
        return self.state.patients.list()

    def _require_patient(self, patient_id: str) -> Patient:
        patient = self.state.patients.get(patient_id)
        if patient is None:
            raise NotFoundError("patient", patient_id)
        return patient
