from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from carehome.application.dto.archive_dto import (
    DischargedPatientResponse,
    MedicationRecordSnapshot,
    MedicationSnapshot,
    PatientArchiveSnapshot,
    PrescriptionSnapshot,
)
from carehome.infrastructure.db.models_sqlalchemy import DischargedPatient
from carehome.infrastructure.db.repositories.archive_repo import DischargeArchiveRepository
from carehome.infrastructure.db.session import session_scope

logger = logging.getLogger(__name__)


class DischargeArchive(Protocol):
    def archive_discharge(
        self,
        snapshot: PatientArchiveSnapshot,
        reason: str,
        notes: str,
        staff_id: str,
    ) -> None:
        """Durably record a discharged patient. Raises on failure."""
        ...


@dataclass
class InMemoryDischargeArchive:
    clock: Callable[[], datetime] = datetime.now
    entries: list[DischargedPatientResponse] = field(default_factory=list)

    def archive_discharge(
        self,
        snapshot: PatientArchiveSnapshot,
        reason: str,
        notes: str,
        staff_id: str,
    ) -> None:
        self.entries.append(
            DischargedPatientResponse(
                patient=snapshot,
                discharge_date=self.clock(),
                discharge_reason=reason,
                discharge_notes=notes,
                discharged_by=staff_id,
            )
        )


class SqlDischargeArchive:
    """Writes the patient, prescriptions, medications and administration records in one transaction."""

    def __init__(
        self,
        repo: DischargeArchiveRepository | None = None,
        session_factory: Callable = session_scope,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repo = repo or DischargeArchiveRepository()
        self.session_factory = session_factory
        self.clock = clock

    def archive_discharge(
        self,
        snapshot: PatientArchiveSnapshot,
        reason: str,
        notes: str,
        staff_id: str,
    ) -> None:
        with self.session_factory() as session:
            self.repo.add_discharge(
                session,
                snapshot,
                reason=reason,
                notes=notes,
                staff_id=staff_id,
                archived_at=self.clock(),
            )
        logger.info("Archived discharged patient %s", snapshot.patient_id)

    def get_discharged(self, patient_id: str) -> DischargedPatientResponse | None:
        with self.session_factory() as session:
            row = self.repo.get_by_id(session, patient_id)
            if row is None:
                return None
            return _to_response(row)

    def list_discharged(self, limit: int = 100) -> list[DischargedPatientResponse]:
        with self.session_factory() as session:
            return [_to_response(row) for row in self.repo.list_discharged(session, limit=limit)]


def _to_response(row: DischargedPatient) -> DischargedPatientResponse:
    snapshot = PatientArchiveSnapshot(
        patient_id=row.patient_id,
        name=row.name,
        email=row.email or "",
        phone=row.phone or "",
        date_of_birth=row.date_of_birth,
        gender=row.gender,
        age=row.age or 0,
        medical_condition=row.medical_condition or "",
        requires_isolation=bool(row.requires_isolation),
        bed_id=row.bed_id,
        prescriptions=[
            PrescriptionSnapshot(
                prescription_id=p.prescription_id,
                doctor_id=p.doctor_id,
                created_at=p.prescription_date,
                notes=p.notes or "",
                medications=[
                    MedicationSnapshot(
                        name=m.medication_name,
                        dosage=m.dosage,
                        frequency=m.frequency,
                        administration_time=m.administration_time or "",
                        instructions=m.instructions or "",
                    )
                    for m in p.medications
                ],
            )
            for p in row.prescriptions
        ],
        medication_history=[
            MedicationRecordSnapshot(
                record_id=r.record_id,
                nurse_id=r.nurse_id,
                medication_name=r.medication_name,
                dosage_given=r.dosage_given,
                administered_at=r.administration_time,
                notes=r.notes or "",
                administered=bool(r.administered),
            )
            for r in row.medication_records
        ],
    )
    return DischargedPatientResponse(
        patient=snapshot,
        discharge_date=row.discharge_date,
        discharge_reason=row.discharge_reason,
        discharge_notes=row.discharge_notes,
        discharged_by=row.discharged_by,
    )
