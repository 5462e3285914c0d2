from __future__ import annotations

import json
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError

from carehome.application.dto.archive_dto import (
    MedicationRecordSnapshot,
    MedicationSnapshot,
    PrescriptionSnapshot,
)
from carehome.application.dto.snapshot_dto import (
    SNAPSHOT_VERSION,
    BedRecord,
    PatientRecord,
    RoomRecord,
    SnapshotV1,
    StaffRecord,
    WardRecord,
)
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.facility import Bed, FacilityDirectory, Room, Ward
from carehome.domain.models.patient import (
    Medication,
    MedicationRecord,
    Patient,
    PatientRegistry,
    Prescription,
)
from carehome.domain.models.staff import Staff, StaffDirectory


def encode_state(state: CareHomeState, saved_at: datetime | None = None) -> bytes:
    snapshot = SnapshotV1(
        saved_at=saved_at or datetime.now(),
        wards=[_ward_record(ward) for ward in state.facility.wards],
        staff=[
            StaffRecord(
                staff_id=staff.staff_id,
                name=staff.name,
                email=staff.email,
                phone=staff.phone,
                username=staff.username,
                password=staff.password,
                role=staff.role,
                qualification=staff.qualification,
                weekly_shifts={day: list(slots) for day, slots in staff.weekly_shifts.items() if slots},
            )
            for staff in state.staff.list()
        ],
        patients=[_patient_record(patient) for patient in state.patients.list()],
        discharged_patient_ids=sorted(state.patients.discharged_ids),
        retired_prescription_ids=sorted(state.patients.retired_prescription_ids),
        retired_record_ids=sorted(state.patients.retired_record_ids),
    )
    return snapshot.model_dump_json(indent=2).encode("utf-8")


def decode_state(blob: bytes) -> CareHomeState:
    """Rebuild engine state from an encoded snapshot.

    Raises ``ValueError`` for unknown versions, malformed payloads and snapshots
    whose bed occupancy contradicts the patient records.
    """
    try:
        raw = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError("Snapshot root must be an object")
    version = raw.get("version")
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version: {version!r}")
    try:
        snapshot = SnapshotV1.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValueError(f"Snapshot payload is invalid: {exc}") from exc

    facility = FacilityDirectory(
        [
            Ward(
                ward_id=ward.ward_id,
                name=ward.name,
                rooms=[
                    Room(
                        room_id=room.room_id,
                        ward_id=ward.ward_id,
                        beds=[
                            Bed(
                                bed_id=bed.bed_id,
                                room_id=room.room_id,
                                ward_id=ward.ward_id,
                                patient_id=bed.patient_id,
                            )
                            for bed in room.beds
                        ],
                    )
                    for room in ward.rooms
                ],
            )
            for ward in snapshot.wards
        ]
    )
    staff = StaffDirectory(
        [
            Staff(
                staff_id=record.staff_id,
                name=record.name,
                email=record.email,
                phone=record.phone,
                username=record.username,
                password=record.password,
                role=record.role,
                qualification=record.qualification,
                weekly_shifts={day: list(slots) for day, slots in record.weekly_shifts.items()},
            )
            for record in snapshot.staff
        ]
    )
    patients = PatientRegistry(
        [_patient_from_record(record) for record in snapshot.patients],
        discharged_ids=set(snapshot.discharged_patient_ids),
        retired_prescription_ids=set(snapshot.retired_prescription_ids),
        retired_record_ids=set(snapshot.retired_record_ids),
    )
    _check_occupancy(facility, patients)
    return CareHomeState(facility=facility, staff=staff, patients=patients)


def _ward_record(ward: Ward) -> WardRecord:
    return WardRecord(
        ward_id=ward.ward_id,
        name=ward.name,
        rooms=[
            RoomRecord(
                room_id=room.room_id,
                beds=[BedRecord(bed_id=bed.bed_id, patient_id=bed.patient_id) for bed in room.beds],
            )
            for room in ward.rooms
        ],
    )


def _patient_record(patient: Patient) -> PatientRecord:
    return PatientRecord(
        patient_id=patient.patient_id,
        name=patient.name,
        email=patient.email,
        phone=patient.phone,
        date_of_birth=patient.date_of_birth,
        gender=patient.gender,
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


def _patient_from_record(record: PatientRecord) -> Patient:
    return Patient(
        patient_id=record.patient_id,
        name=record.name,
        email=record.email,
        phone=record.phone,
        date_of_birth=record.date_of_birth,
        gender=record.gender,
        medical_condition=record.medical_condition,
        requires_isolation=record.requires_isolation,
        bed_id=record.bed_id,
        prescriptions=[
            Prescription(
                prescription_id=p.prescription_id,
                patient_id=record.patient_id,
                doctor_id=p.doctor_id,
                notes=p.notes,
                created_at=p.created_at,
                medications=[
                    Medication(
                        name=m.name,
                        dosage=m.dosage,
                        frequency=m.frequency,
                        administration_time=m.administration_time,
                        instructions=m.instructions,
                    )
                    for m in p.medications
                ],
            )
            for p in record.prescriptions
        ],
        medication_history=[
            MedicationRecord(
                record_id=r.record_id,
                patient_id=record.patient_id,
                nurse_id=r.nurse_id,
                medication_name=r.medication_name,
                dosage_given=r.dosage_given,
                administered_at=r.administered_at,
                notes=r.notes,
                administered=r.administered,
            )
            for r in record.medication_history
        ],
    )


def _check_occupancy(facility: FacilityDirectory, patients: PatientRegistry) -> None:
    seen: dict[str, str] = {}
    for bed in facility.iter_beds():
        if bed.patient_id is None:
            continue
        if bed.patient_id in seen:
            raise ValueError(f"Patient {bed.patient_id} occupies both {seen[bed.patient_id]} and {bed.bed_id}")
        patient = patients.get(bed.patient_id)
        if patient is None:
            raise ValueError(f"Bed {bed.bed_id} references unknown patient {bed.patient_id}")
        if patient.bed_id != bed.bed_id:
            raise ValueError(f"Patient {patient.patient_id} records bed {patient.bed_id}, not {bed.bed_id}")
        seen[bed.patient_id] = bed.bed_id

    for patient in patients.list():
        if patient.bed_id is not None and patient.patient_id not in seen:
            raise ValueError(f"Patient {patient.patient_id} records bed {patient.bed_id} which is not occupied by them")

    for ward in facility.wards:
        for room in ward.rooms:
            genders = {
                patients.get(bed.patient_id).gender  # type: ignore[union-attr]
                for bed in room.beds
                if bed.patient_id is not None
            }
            if len(genders) > 1:
                raise ValueError(f"Room {room.room_id} holds mixed genders: {', '.join(sorted(genders))}")
