from __future__ import annotations

import pytest

from carehome.domain.models.facility import FacilityDirectory, Room, Ward, build_default_facility


def test_default_layout_matches_two_ward_plan() -> None:
    facility = build_default_facility()
    wards = {ward.ward_id: ward for ward in facility.wards}

    assert [room.bed_count for room in wards["W1"].rooms] == [4, 2, 1, 3, 2, 4]
    assert [room.bed_count for room in wards["W2"].rooms] == [3, 1, 4, 2, 1, 3]
    assert wards["W1"].name == "General Care Ward"
    assert facility.total_beds == 30
    assert facility.find_bed("W2-R3-B4") is not None
    assert facility.find_bed("W2-R3-B5") is None
    assert facility.find_bed(None) is None


@pytest.mark.parametrize("bed_count", [0, 5])
def test_room_capacity_is_one_to_four_beds(bed_count: int) -> None:
    with pytest.raises(ValueError):
        Room.with_beds("W9-R1", "W9", bed_count)


def test_occupy_and_vacate_only_flip_the_bed() -> None:
    facility = build_default_facility()
    bed = facility.find_bed("W1-R1-B2")
    assert bed is not None

    facility.occupy(bed, "PAT001")
    assert bed.occupied is True
    assert facility.bed_of_patient("PAT001") is bed
    assert facility.room_of("W1-R1-B2").occupied_count == 1  # type: ignore[union-attr]

    facility.vacate(bed)
    assert bed.occupied is False
    assert bed.patient_id is None


def test_available_beds_is_restartable_and_skips_occupied() -> None:
    facility = build_default_facility()
    facility.occupy(facility.find_bed("W1-R1-B1"), "PAT001")  # type: ignore[arg-type]

    first = [bed.bed_id for bed in facility.available_beds()]
    second = [bed.bed_id for bed in facility.available_beds()]
    assert first == second
    assert "W1-R1-B1" not in first
    assert len(first) == 29


def test_duplicate_rooms_are_rejected() -> None:
    ward = Ward("W1", "General Care Ward", [Room.with_beds("W1-R1", "W1", 2)])
    duplicate = Ward("W3", "Overflow", [Room.with_beds("W1-R1", "W3", 1)])
    facility = FacilityDirectory([ward])
    with pytest.raises(ValueError, match="Duplicate room"):
        facility.add_ward(duplicate)
