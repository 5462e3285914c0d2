from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from carehome.application.dto.archive_dto import PatientArchiveSnapshot
from carehome.infrastructure.db.models_sqlalchemy import (
    ArchivedMedication,
    ArchivedMedicationRecord,
    ArchivedPrescription,
    DischargedPatient,
)


class DischargeArchiveRepository:
    def add_discharge(
        self,
        session: Session,
        snapshot: PatientArchiveSnapshot,
        *,
        reason: str,
        notes: str,
        staff_id: str,
        archived_at: datetime,
    ) -> DischargedPatient:
        row = DischargedPatient(
            patient_id=snapshot.patient_id,
            name=snapshot.name,
            email=snapshot.email,
            phone=snapshot.phone,
            date_of_birth=snapshot.date_of_birth,
            gender=snapshot.gender,
            age=snapshot.age,
            medical_condition=snapshot.medical_condition,
            requires_isolation=snapshot.requires_isolation,
            bed_id=snapshot.bed_id,
            discharge_date=archived_at,
            discharge_reason=reason,
            discharge_notes=notes,
            discharged_by=staff_id,
        )
        for prescription in snapshot.prescriptions:
            archived = ArchivedPrescription(
                prescription_id=prescription.prescription_id,
                doctor_id=prescription.doctor_id,
                prescription_date=prescription.created_at,
                notes=prescription.notes,
                archived_date=archived_at,
            )
            for medication in prescription.medications:
                archived.medications.append(
                    ArchivedMedication(
                        medication_name=medication.name,
                        dosage=medication.dosage,
                        frequency=medication.frequency,
                        administration_time=medication.administration_time,
                        instructions=medication.instructions,
                    )
                )
            row.prescriptions.append(archived)
        for record in snapshot.medication_history:
            row.medication_records.append(
                ArchivedMedicationRecord(
                    record_id=record.record_id,
                    nurse_id=record.nurse_id,
                    medication_name=record.medication_name,
                    dosage_given=record.dosage_given,
                    administration_time=record.administered_at,
                    administered=record.administered,
                    notes=record.notes,
                    archived_date=archived_at,
                )
            )
        session.add(row)
        session.flush()
        return row

    def get_by_id(self, session: Session, patient_id: str) -> DischargedPatient | None:
        stmt = (
            select(DischargedPatient)
            .where(DischargedPatient.patient_id == patient_id)
            .options(
                selectinload(DischargedPatient.prescriptions).selectinload(ArchivedPrescription.medications),
                selectinload(DischargedPatient.medication_records),
            )
        )
        return session.execute(stmt).scalar_one_or_none()

    def list_discharged(self, session: Session, limit: int = 100) -> list[DischargedPatient]:
        stmt = select(DischargedPatient).order_by(DischargedPatient.discharge_date.desc()).limit(limit)
        return list(session.execute(stmt).scalars())
