from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from carehome.application.dto.archive_dto import PatientArchiveSnapshot
from carehome.application.dto.patient_dto import BedResponse, PatientAdmissionRequest
from carehome.application.errors import (
    ArchiveError,
    GenderSegregationViolation,
    NotFoundError,
    OccupancyConflict,
    ValidationError,
)
from carehome.application.security.guards import AccessGuard
from carehome.config import ArchiveFailurePolicy, settings
from carehome.domain.constants import AuditAction
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.facility import Bed, Room
from carehome.domain.models.patient import Patient
from carehome.domain.rules.validation import is_valid_gender
from carehome.infrastructure.archive.discharge_archive import DischargeArchive
from carehome.infrastructure.audit.audit_journal import AuditJournal

logger = logging.getLogger(__name__)


class AdmissionService:
    """Admit, transfer and discharge patients while keeping bed and room invariants intact.

    Every check runs before the first mutation, so a failed call leaves the
    facility and the registry exactly as they were.
    """

    def __init__(
        self,
        state: CareHomeState,
        guard: AccessGuard,
        audit: AuditJournal,
        archive: DischargeArchive,
        archive_failure_policy: ArchiveFailurePolicy | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.state = state
        self.guard = guard
        self.audit = audit
        self.archive = archive
        self.archive_failure_policy = archive_failure_policy or settings.archive_failure_policy
        self.clock = clock

    def admit(
        self,
        patient: Patient | PatientAdmissionRequest,
        bed_id: str,
        staff_id: str,
    ) -> Patient:
        self.guard.require_capability(staff_id, "add_patient")
        if isinstance(patient, PatientAdmissionRequest):
            patient = patient.to_patient()
        self._validate_new_patient(patient)

        bed, room = self._resolve_bed(bed_id)
        self._check_room_gender(room, bed, patient)
        if bed.occupied:
            raise OccupancyConflict(bed.bed_id, bed.patient_id or "", patient.patient_id)

        self.state.facility.occupy(bed, patient.patient_id)
        patient.bed_id = bed.bed_id
        self.state.patients.add(patient)
        self.audit.log(staff_id, AuditAction.ADD_PATIENT, f"Added patient {patient.name} to bed {bed.bed_id}")
        return patient

    def transfer(self, patient_id: str, new_bed_id: str, staff_id: str) -> Bed:
        member = self.guard.require_capability(staff_id, "move_patient")
        self.guard.require_rostered(member)
        patient = self._require_patient(patient_id)
        bed, room = self._resolve_bed(new_bed_id)
        if bed.patient_id == patient.patient_id:
            return bed
        self._check_room_gender(room, bed, patient)
        if bed.occupied:
            raise OccupancyConflict(bed.bed_id, bed.patient_id or "", patient.patient_id)

        source = self.state.facility.find_bed(patient.bed_id)
        if source is not None and source.patient_id == patient.patient_id:
            self.state.facility.vacate(source)
        self.state.facility.occupy(bed, patient.patient_id)
        patient.bed_id = bed.bed_id
        self.audit.log(
            staff_id,
            AuditAction.MOVE_PATIENT,
            f"Moved patient {patient.name} from {source.bed_id if source else 'unknown'} to {bed.bed_id}",
        )
        return bed

    def discharge(self, patient_id: str, reason: str, notes: str, staff_id: str) -> PatientArchiveSnapshot:
        self.guard.require_capability(staff_id, "discharge_patient")
        patient = self._require_patient(patient_id)
        snapshot = PatientArchiveSnapshot.from_patient(patient, today=self.clock().date())

        try:
            self.archive.archive_discharge(snapshot, reason, notes, staff_id)
        except Exception as exc:  # noqa: BLE001
            if self.archive_failure_policy == "abort":
                logger.error("Archiving patient %s failed; discharge aborted", patient_id, exc_info=True)
                raise ArchiveError(patient_id, exc) from exc
            logger.error("Archiving patient %s failed; continuing discharge", patient_id, exc_info=True)

        bed = self.state.facility.find_bed(patient.bed_id)
        if bed is not None and bed.patient_id == patient.patient_id:
            self.state.facility.vacate(bed)
        self.state.patients.remove(patient_id)
        self.audit.log(
            staff_id,
            AuditAction.DISCHARGE_PATIENT,
            f"Discharged patient {patient.name} (ID: {patient_id}) from bed {patient.bed_id}. Reason: {reason}",
        )
        return snapshot

    def available_beds(self) -> list[BedResponse]:
        return [_bed_response(bed) for bed in self.state.facility.available_beds()]

    def list_beds(self) -> list[BedResponse]:
        return [_bed_response(bed) for bed in self.state.facility.iter_beds()]

    def ward_summaries(self) -> list[dict[str, object]]:
        summaries: list[dict[str, object]] = []
        for ward in self.state.facility.wards:
            summaries.append(
                {
                    "ward_id": ward.ward_id,
                    "name": ward.name,
                    "total_beds": ward.total_beds,
                    "available_beds": ward.available_beds,
                    "occupied_beds": ward.total_beds - ward.available_beds,
                    "rooms": [
                        {
                            "room_id": room.room_id,
                            "total_beds": room.bed_count,
                            "available_beds": room.available_count,
                            "occupied_beds": room.occupied_count,
                        }
                        for room in ward.rooms
                    ],
                }
            )
        return summaries

    def _validate_new_patient(self, patient: Patient) -> None:
        if not is_valid_gender(patient.gender):
            raise ValidationError("gender", f"Gender must be M or F, got {patient.gender!r}")
        if patient.patient_id in self.state.patients:
            raise ValidationError("patient_id", f"Patient {patient.patient_id} is already admitted")
        if self.state.patients.was_discharged(patient.patient_id):
            raise ValidationError("patient_id", f"Patient id {patient.patient_id} belongs to a discharged patient")

    def _require_patient(self, patient_id: str) -> Patient:
        patient = self.state.patients.get(patient_id)
        if patient is None:
            raise NotFoundError("patient", patient_id)
        return patient

    def _resolve_bed(self, bed_id: str) -> tuple[Bed, Room]:
        bed = self.state.facility.find_bed(bed_id)
        if bed is None:
            raise NotFoundError("bed", bed_id)
        room = self.state.facility.room_of(bed_id)
        if room is None:
            raise NotFoundError("room", bed.room_id)
        return bed, room

    def _check_room_gender(self, room: Room, target: Bed, patient: Patient) -> None:
        for bed in room.beds:
            if bed is target or not bed.occupied or bed.patient_id == patient.patient_id:
                continue
            occupant = self.state.patients.get(bed.patient_id or "")
            if occupant is not None and occupant.gender != patient.gender:
                raise GenderSegregationViolation(room.room_id, occupant.gender, patient.gender)


def _bed_response(bed: Bed) -> BedResponse:
    return BedResponse(
        bed_id=bed.bed_id,
        room_id=bed.room_id,
        ward_id=bed.ward_id,
        occupied=bed.occupied,
        patient_id=bed.patient_id,
    )
