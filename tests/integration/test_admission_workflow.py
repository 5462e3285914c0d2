from __future__ import annotations

import pytest

from carehome.application.errors import (
    ArchiveError,
    AuthorizationError,
    GenderSegregationViolation,
    NotFoundError,
    OccupancyConflict,
    RosterViolation,
    ValidationError,
)
from carehome.application.services.admission_service import AdmissionService
from carehome.container import Container
from carehome.domain.constants import AuditAction
from carehome_fixtures import FixedClock, make_patient


class _BrokenArchive:
    def archive_discharge(self, snapshot, reason, notes, staff_id) -> None:  # noqa: ANN001
        raise OSError("archive offline")


def _admission_with_archive(container: Container, policy: str) -> AdmissionService:
    return AdmissionService(
        container.state,
        container.guard,
        container.audit,
        _BrokenArchive(),
        archive_failure_policy=policy,  # type: ignore[arg-type]
        clock=container.guard.clock,
    )


def test_admit_transfer_discharge_round(container: Container, archive) -> None:
    service = container.admission_service
    state = container.state

    service.admit(make_patient("PAT001", "F", name="Alice Smith"), "W1-R1-B1", "MGR001")
    with pytest.raises(OccupancyConflict) as exc_info:
        service.admit(make_patient("PAT002", "M"), "W1-R1-B1", "MGR001")
    assert exc_info.value.current_patient_id == "PAT001"

    service.transfer("PAT001", "W1-R2-B1", "NUR001")
    assert state.facility.find_bed("W1-R1-B1").patient_id is None
    assert state.facility.find_bed("W1-R2-B1").patient_id == "PAT001"
    assert state.patients.get("PAT001").bed_id == "W1-R2-B1"

    snapshot = service.discharge("PAT001", "Recovered", "", "MGR001")
    assert snapshot.patient_id == "PAT001"
    assert "PAT001" not in state.patients
    assert state.facility.find_bed("W1-R2-B1").patient_id is None

    assert len(archive.entries) == 1
    entry = archive.entries[0]
    assert entry.discharge_reason == "Recovered"
    assert entry.discharged_by == "MGR001"
    assert entry.patient.prescriptions == []
    assert entry.patient.medication_history == []

    assert container.audit.actions() == [
        AuditAction.ADD_PATIENT,
        AuditAction.MOVE_PATIENT,
        AuditAction.DISCHARGE_PATIENT,
    ]


def test_gender_violation_leaves_no_partial_write(container: Container) -> None:
    service = container.admission_service
    service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")

    with pytest.raises(GenderSegregationViolation) as exc_info:
        service.admit(make_patient("PAT002", "M"), "W1-R1-B2", "MGR001")
    assert exc_info.value.room_id == "W1-R1"

    assert "PAT002" not in container.state.patients
    assert container.state.facility.find_bed("W1-R1-B2").patient_id is None
    assert container.audit.actions() == [AuditAction.ADD_PATIENT]


def test_same_gender_shares_room_and_gender_check_runs_before_occupancy(container: Container) -> None:
    service = container.admission_service
    service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    service.admit(make_patient("PAT002", "F"), "W1-R1-B2", "MGR001")

    # Occupied bed in a room of the other gender reports the gender rule first.
    with pytest.raises(GenderSegregationViolation):
        service.admit(make_patient("PAT003", "M"), "W1-R1-B1", "MGR001")


def test_nurse_cannot_admit_and_denial_is_audited(container: Container) -> None:
    with pytest.raises(AuthorizationError) as exc_info:
        container.admission_service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "NUR001")

    assert exc_info.value.action == "add_patient"
    assert container.audit.actions() == [AuditAction.ACCESS_DENIED]
    assert container.state.facility.find_bed("W1-R1-B1").patient_id is None


def test_unknown_staff_and_bed_raise_not_found(container: Container) -> None:
    with pytest.raises(NotFoundError):
        container.admission_service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "GHOST1")
    with pytest.raises(NotFoundError) as exc_info:
        container.admission_service.admit(make_patient("PAT001", "F"), "W9-R1-B1", "MGR001")
    assert exc_info.value.entity == "bed"


def test_transfer_outside_rostered_hours_is_rejected(container: Container, clock: FixedClock) -> None:
    service = container.admission_service
    service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    clock.at_hour(20)

    with pytest.raises(RosterViolation) as exc_info:
        service.transfer("PAT001", "W1-R2-B1", "NUR001")
    assert exc_info.value.staff_id == "NUR001"
    assert container.state.patients.get("PAT001").bed_id == "W1-R1-B1"

    # Managers are always on duty.
    service.transfer("PAT001", "W1-R2-B1", "MGR001")
    assert container.state.patients.get("PAT001").bed_id == "W1-R2-B1"


def test_transfer_to_current_bed_is_noop(container: Container) -> None:
    service = container.admission_service
    service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    bed = service.transfer("PAT001", "W1-R1-B1", "NUR001")
    assert bed.patient_id == "PAT001"
    assert container.audit.actions() == [AuditAction.ADD_PATIENT]


def test_transfer_ignores_own_bed_in_gender_scan(container: Container) -> None:
    service = container.admission_service
    service.admit(make_patient("PAT001", "M"), "W1-R1-B1", "MGR001")
    service.transfer("PAT001", "W1-R1-B2", "NUR001")
    assert container.state.facility.find_bed("W1-R1-B1").patient_id is None


def test_patient_ids_are_never_reused(container: Container) -> None:
    service = container.admission_service
    service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    with pytest.raises(ValidationError):
        service.admit(make_patient("PAT001", "F"), "W1-R1-B2", "MGR001")

    service.discharge("PAT001", "Recovered", "", "MGR001")
    with pytest.raises(ValidationError) as exc_info:
        service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    assert exc_info.value.field == "patient_id"


def test_invalid_gender_is_rejected(container: Container) -> None:
    with pytest.raises(ValidationError):
        container.admission_service.admit(make_patient("PAT001", "X"), "W1-R1-B1", "MGR001")


def test_only_managers_discharge(container: Container) -> None:
    container.admission_service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    with pytest.raises(AuthorizationError):
        container.admission_service.discharge("PAT001", "Recovered", "", "DOC001")
    with pytest.raises(NotFoundError):
        container.admission_service.discharge("PAT404", "Recovered", "", "MGR001")


def test_archive_failure_continue_still_discharges(container: Container) -> None:
    container.admission_service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    service = _admission_with_archive(container, "continue")

    service.discharge("PAT001", "Recovered", "", "MGR001")

    assert "PAT001" not in container.state.patients
    assert container.state.facility.find_bed("W1-R1-B1").patient_id is None
    assert container.audit.actions()[-1] == AuditAction.DISCHARGE_PATIENT


def test_archive_failure_abort_keeps_patient(container: Container) -> None:
    container.admission_service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    service = _admission_with_archive(container, "abort")

    with pytest.raises(ArchiveError) as exc_info:
        service.discharge("PAT001", "Recovered", "", "MGR001")

    assert isinstance(exc_info.value.cause, OSError)
    assert "PAT001" in container.state.patients
    assert container.state.facility.find_bed("W1-R1-B1").patient_id == "PAT001"
    assert container.audit.actions() == [AuditAction.ADD_PATIENT]


def test_bed_listings_and_ward_summaries(container: Container) -> None:
    service = container.admission_service
    assert len(service.available_beds()) == 30
    service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")

    assert len(service.available_beds()) == 29
    assert len(service.list_beds()) == 30
    ward = service.ward_summaries()[0]
    assert ward["ward_id"] == "W1"
    assert ward["occupied_beds"] == 1
    assert ward["rooms"][0]["available_beds"] == 3
