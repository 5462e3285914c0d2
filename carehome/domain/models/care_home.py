from __future__ import annotations

from dataclasses import dataclass, field

from carehome.domain.models.facility import FacilityDirectory, build_default_facility
from carehome.domain.models.patient import PatientRegistry
from carehome.domain.models.staff import StaffDirectory


@dataclass
class CareHomeState:
    """The whole mutable engine state, constructed once and handed to every service."""

    facility: FacilityDirectory = field(default_factory=build_default_facility)
    staff: StaffDirectory = field(default_factory=StaffDirectory)
    patients: PatientRegistry = field(default_factory=PatientRegistry)
