from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from carehome.domain.constants import MAX_BEDS_PER_ROOM, MIN_BEDS_PER_ROOM

# (ward id, ward name, beds per room) for the standard two-ward layout
DEFAULT_LAYOUT: tuple[tuple[str, str, tuple[int, ...]], ...] = (
    ("W1", "General Care Ward", (4, 2, 1, 3, 2, 4)),
    ("W2", "Intensive Care Ward", (3, 1, 4, 2, 1, 3)),
)


@dataclass(slots=True)
class Bed:
    bed_id: str
    room_id: str
    ward_id: str
    patient_id: str | None = None

    @property
    def occupied(self) -> bool:
        return self.patient_id is not None


@dataclass(slots=True)
class Room:
    room_id: str
    ward_id: str
    beds: list[Bed] = field(default_factory=list)

    @classmethod
    def with_beds(cls, room_id: str, ward_id: str, bed_count: int) -> Room:
        if not MIN_BEDS_PER_ROOM <= bed_count <= MAX_BEDS_PER_ROOM:
            raise ValueError(
                f"Room {room_id} must hold {MIN_BEDS_PER_ROOM}-{MAX_BEDS_PER_ROOM} beds, got {bed_count}"
            )
        beds = [Bed(bed_id=f"{room_id}-B{i}", room_id=room_id, ward_id=ward_id) for i in range(1, bed_count + 1)]
        return cls(room_id=room_id, ward_id=ward_id, beds=beds)

    @property
    def bed_count(self) -> int:
        return len(self.beds)

    @property
    def available_count(self) -> int:
        return sum(1 for bed in self.beds if not bed.occupied)

    @property
    def occupied_count(self) -> int:
        return sum(1 for bed in self.beds if bed.occupied)

    def get_bed(self, bed_id: str) -> Bed | None:
        return next((bed for bed in self.beds if bed.bed_id == bed_id), None)


@dataclass(slots=True)
class Ward:
    ward_id: str
    name: str
    rooms: list[Room] = field(default_factory=list)

    def add_room(self, room: Room) -> None:
        self.rooms.append(room)

    @property
    def total_beds(self) -> int:
        return sum(room.bed_count for room in self.rooms)

    @property
    def available_beds(self) -> int:
        return sum(room.available_count for room in self.rooms)


class FacilityDirectory:
    """Ward -> room -> bed topology with per-bed occupancy.

    ``occupy`` and ``vacate`` only flip a bed's occupant. Room gender rules and
    occupancy conflicts are checked by the admission workflow before either is called.
    """

    def __init__(self, wards: list[Ward] | None = None) -> None:
        self._wards: list[Ward] = []
        self._rooms: dict[str, Room] = {}
        self._beds: dict[str, Bed] = {}
        for ward in wards or []:
            self.add_ward(ward)

    def add_ward(self, ward: Ward) -> None:
        for room in ward.rooms:
            if room.room_id in self._rooms:
                raise ValueError(f"Duplicate room id: {room.room_id}")
            for bed in room.beds:
                if bed.bed_id in self._beds:
                    raise ValueError(f"Duplicate bed id: {bed.bed_id}")
        self._wards.append(ward)
        for room in ward.rooms:
            self._rooms[room.room_id] = room
            for bed in room.beds:
                self._beds[bed.bed_id] = bed

    @property
    def wards(self) -> list[Ward]:
        return list(self._wards)

    def find_bed(self, bed_id: str | None) -> Bed | None:
        if bed_id is None:
            return None
        return self._beds.get(bed_id)

    def room_of(self, bed_id: str) -> Room | None:
        bed = self._beds.get(bed_id)
        if bed is None:
            return None
        return self._rooms.get(bed.room_id)

    def iter_beds(self) -> Iterator[Bed]:
        for ward in self._wards:
            for room in ward.rooms:
                yield from room.beds

    def available_beds(self) -> Iterator[Bed]:
        return (bed for bed in self.iter_beds() if not bed.occupied)

    def bed_of_patient(self, patient_id: str) -> Bed | None:
        return next((bed for bed in self.iter_beds() if bed.patient_id == patient_id), None)

    def occupy(self, bed: Bed, patient_id: str) -> None:
        bed.patient_id = patient_id

    def vacate(self, bed: Bed) -> None:
        bed.patient_id = None

    @property
    def total_beds(self) -> int:
        return len(self._beds)


def build_default_facility() -> FacilityDirectory:
    wards: list[Ward] = []
    for ward_id, name, bed_counts in DEFAULT_LAYOUT:
        ward = Ward(ward_id=ward_id, name=name)
        for index, bed_count in enumerate(bed_counts, start=1):
            ward.add_room(Room.with_beds(f"{ward_id}-R{index}", ward_id, bed_count))
        wards.append(ward)
    return FacilityDirectory(wards)
