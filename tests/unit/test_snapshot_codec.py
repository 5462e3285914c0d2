from __future__ import annotations

import json
from datetime import datetime

import pytest

from carehome.domain.constants import ShiftSlot, StaffRole
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.patient import Medication, MedicationRecord, Prescription
from carehome.infrastructure.snapshot.snapshot_codec import decode_state, encode_state
from carehome_fixtures import MONDAY_MORNING, make_patient, make_staff


def _populated_state() -> CareHomeState:
    state = CareHomeState()
    state.staff.add(make_staff("MGR001", StaffRole.MANAGER))
    state.staff.add(make_staff("NUR001", StaffRole.NURSE, ShiftSlot.NURSE_MORNING.value))

    alice = make_patient("PAT001", "F", name="Alice Smith")
    bed = state.facility.find_bed("W1-R1-B1")
    assert bed is not None
    state.facility.occupy(bed, alice.patient_id)
    alice.bed_id = bed.bed_id
    alice.add_prescription(
        Prescription(
            prescription_id="RX001",
            patient_id="PAT001",
            doctor_id="DOC001",
            created_at=MONDAY_MORNING,
            medications=[Medication(name="Paracetamol", dosage="500 mg", frequency="Twice daily")],
        )
    )
    alice.add_medication_record(
        MedicationRecord(
            record_id="MR001",
            patient_id="PAT001",
            nurse_id="NUR001",
            medication_name="Paracetamol",
            dosage_given="500 mg",
            administered_at=MONDAY_MORNING,
            administered=True,
        )
    )
    state.patients.add(alice)
    return state


def _mutate(blob: bytes, change) -> bytes:
    raw = json.loads(blob)
    change(raw)
    return json.dumps(raw).encode("utf-8")


def test_decode_restores_occupancy_staff_and_clinical_history() -> None:
    state = _populated_state()
    state.patients.add(make_patient("PAT009", "M"))
    state.patients.remove("PAT009")

    restored = decode_state(encode_state(state, saved_at=MONDAY_MORNING))

    bed = restored.facility.find_bed("W1-R1-B1")
    assert bed is not None and bed.patient_id == "PAT001"
    assert restored.facility.total_beds == state.facility.total_beds

    alice = restored.patients.get("PAT001")
    assert alice is not None
    assert alice.bed_id == "W1-R1-B1"
    assert alice.prescriptions[0].medications[0].dosage == "500 mg"
    assert alice.prescriptions[0].patient_id == "PAT001"
    assert alice.medication_history[0].administered is True
    assert restored.patients.was_discharged("PAT009")

    nurse = restored.staff.get("NUR001")
    assert nurse is not None
    assert nurse.role == StaffRole.NURSE
    assert nurse.shifts_for_day("SUN") == [ShiftSlot.NURSE_MORNING.value]


def test_encode_writes_version_and_saved_at() -> None:
    raw = json.loads(encode_state(CareHomeState(), saved_at=datetime(2026, 1, 2, 3, 4, 5)))
    assert raw["version"] == 1
    assert raw["saved_at"].startswith("2026-01-02T03:04:05")
    assert raw["patients"] == []


@pytest.mark.parametrize("blob", [b"not json", b"[]", b'{"version": 2}', b'{"version": 1}'])
def test_decode_rejects_unreadable_or_unknown_payloads(blob: bytes) -> None:
    with pytest.raises(ValueError):
        decode_state(blob)


def test_decode_rejects_bed_pointing_at_unknown_patient() -> None:
    def point_at_ghost(raw: dict) -> None:
        raw["wards"][0]["rooms"][0]["beds"][1]["patient_id"] = "PAT404"

    with pytest.raises(ValueError, match="unknown patient"):
        decode_state(_mutate(encode_state(_populated_state()), point_at_ghost))


def test_decode_rejects_mixed_gender_room() -> None:
    def add_male_roommate(raw: dict) -> None:
        raw["wards"][0]["rooms"][0]["beds"][1]["patient_id"] = "PAT002"
        patient = dict(raw["patients"][0])
        patient.update(
            patient_id="PAT002", gender="M", bed_id="W1-R1-B2", prescriptions=[], medication_history=[]
        )
        raw["patients"].append(patient)

    with pytest.raises(ValueError, match="mixed genders"):
        decode_state(_mutate(encode_state(_populated_state()), add_male_roommate))


def test_decode_rejects_patient_whose_bed_is_empty() -> None:
    def empty_bed(raw: dict) -> None:
        raw["wards"][0]["rooms"][0]["beds"][0]["patient_id"] = None

    with pytest.raises(ValueError, match="not occupied"):
        decode_state(_mutate(encode_state(_populated_state()), empty_bed))


def test_discharged_clinical_ids_survive_a_reload() -> None:
    state = _populated_state()
    bed = state.facility.find_bed("W1-R1-B1")
    assert bed is not None
    state.facility.vacate(bed)
    state.patients.remove("PAT001")

    restored = decode_state(encode_state(state, saved_at=MONDAY_MORNING))

    assert restored.patients.prescription_id_in_use("RX001")
    assert restored.patients.record_id_in_use("MR001")
    assert not restored.patients.record_id_in_use("MR002")
