from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import cast

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carehome.application.errors import ValidationError
from carehome.container import build_container
from carehome.domain.constants import AuditAction
from carehome.domain.models.patient import Medication, MedicationRecord, Prescription
from carehome.infrastructure.archive.discharge_archive import SqlDischargeArchive
from carehome.infrastructure.audit.audit_journal import SqlAuditJournal
from carehome_fixtures import MONDAY_MORNING, FixedClock, add_core_staff, make_patient, make_session_factory


def test_discharge_is_archived_with_clinical_history(tmp_path: Path) -> None:
    session_factory = make_session_factory(tmp_path / "archive.db")
    clock = FixedClock(MONDAY_MORNING)
    container = build_container(
        session_factory=session_factory,
        snapshot_file=tmp_path / "snapshot.json",
        archive_failure_policy="abort",
        password_scheme="plaintext",
        clock=clock,
    )
    add_core_staff(container)

    patient = make_patient("PAT001", "F", name="Alice Smith")
    container.admission_service.admit(patient, "W1-R1-B1", "MGR001")
    container.clinical_service.add_prescription(
        "PAT001",
        Prescription(
            prescription_id="RX001",
            patient_id="PAT001",
            doctor_id="DOC001",
            created_at=MONDAY_MORNING,
            medications=[
                Medication("Amlodipine", "5mg", "Once daily", "08:00"),
                Medication("Lisinopril", "10mg", "Once daily", "08:00"),
            ],
        ),
        "DOC001",
    )
    container.clinical_service.administer_medication(
        "PAT001",
        MedicationRecord(
            record_id="MR001",
            patient_id="PAT001",
            nurse_id="NUR001",
            medication_name="Amlodipine",
            dosage_given="5mg",
            administered_at=MONDAY_MORNING,
        ),
        "NUR001",
    )
    container.admission_service.discharge("PAT001", "Recovered", "Home care", "MGR001")

    archive = cast(SqlDischargeArchive, container.archive)
    stored = archive.get_discharged("PAT001")
    assert stored is not None
    assert stored.discharge_reason == "Recovered"
    assert stored.discharge_notes == "Home care"
    assert stored.discharged_by == "MGR001"
    assert stored.discharge_date == MONDAY_MORNING
    assert stored.patient.bed_id == "W1-R1-B1"
    assert stored.patient.age == 76
    assert [m.name for m in stored.patient.prescriptions[0].medications] == ["Amlodipine", "Lisinopril"]
    assert stored.patient.medication_history[0].administered is True
    assert [row.patient.patient_id for row in archive.list_discharged()] == ["PAT001"]
    assert archive.get_discharged("PAT404") is None

    events = container.audit.list_events(limit=10)
    assert [event.action for event in events][:1] == [AuditAction.DISCHARGE_PATIENT]
    assert {event.action for event in container.audit.list_events(staff_id="DOC001")} == {
        AuditAction.ADD_PRESCRIPTION
    }


def test_sql_audit_journal_lists_newest_first(tmp_path: Path) -> None:
    clock = FixedClock(MONDAY_MORNING)
    journal = SqlAuditJournal(session_factory=make_session_factory(tmp_path / "audit.db"), clock=clock)
    journal.log("MGR001", AuditAction.ADD_STAFF, "first")
    clock.at_hour(11)
    journal.log("MGR001", AuditAction.ADD_PATIENT, "second")
    journal.log("NUR001", AuditAction.MOVE_PATIENT, "third")

    assert [e.details for e in journal.list_events(staff_id="MGR001")][0] == "second"
    assert [e.details for e in journal.list_events(action=AuditAction.ADD_STAFF)] == ["first"]


def test_sql_audit_journal_swallows_database_errors() -> None:
    class _BrokenSession:
        def add(self, *args, **kwargs):  # noqa: ANN002, ANN003
            raise SQLAlchemyError("db unavailable")

    @contextmanager
    def _session_factory() -> Iterator[Session]:
        yield cast(Session, _BrokenSession())

    journal = SqlAuditJournal(session_factory=_session_factory)
    journal.log("MGR001", AuditAction.LOGIN, "ignored")


def test_reused_clinical_ids_never_reach_the_archive(tmp_path: Path) -> None:
    container = build_container(
        session_factory=make_session_factory(tmp_path / "archive.db"),
        snapshot_file=tmp_path / "snapshot.json",
        archive_failure_policy="abort",
        password_scheme="plaintext",
        clock=FixedClock(MONDAY_MORNING),
    )
    add_core_staff(container)
    container.admission_service.admit(make_patient("PAT001", "F"), "W1-R1-B1", "MGR001")
    container.admission_service.admit(make_patient("PAT002", "F"), "W1-R1-B2", "MGR001")

    def _prescription(patient_id: str) -> Prescription:
        return Prescription(
            prescription_id="RX100",
            patient_id=patient_id,
            doctor_id="DOC001",
            medications=[Medication("Paracetamol", "500 mg", "Twice daily")],
        )

    def _record(patient_id: str) -> MedicationRecord:
        return MedicationRecord(
            record_id="MR1",
            patient_id=patient_id,
            nurse_id="NUR001",
            medication_name="Paracetamol",
            dosage_given="500 mg",
        )

    container.clinical_service.add_prescription("PAT001", _prescription("PAT001"), "DOC001")
    container.clinical_service.administer_medication("PAT001", _record("PAT001"), "NUR001")
    with pytest.raises(ValidationError):
        container.clinical_service.add_prescription("PAT002", _prescription("PAT002"), "DOC001")
    with pytest.raises(ValidationError):
        container.clinical_service.administer_medication("PAT001", _record("PAT001"), "NUR001")
    with pytest.raises(ValidationError):
        container.clinical_service.administer_medication("PAT002", _record("PAT002"), "NUR001")

    container.admission_service.discharge("PAT001", "Recovered", "", "MGR001")
    container.admission_service.discharge("PAT002", "Recovered", "", "MGR001")

    archive = cast(SqlDischargeArchive, container.archive)
    first = archive.get_discharged("PAT001")
    assert first is not None
    assert [p.prescription_id for p in first.patient.prescriptions] == ["RX100"]
    assert [r.record_id for r in first.patient.medication_history] == ["MR1"]
    assert archive.get_discharged("PAT002") is not None
