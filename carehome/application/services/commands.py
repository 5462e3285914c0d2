from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from carehome.application.dto.archive_dto import PatientArchiveSnapshot
from carehome.application.dto.patient_dto import (
    MedicationAdministrationRequest,
    PatientAdmissionRequest,
    PrescriptionRequest,
)
from carehome.application.dto.result_dto import CommandResult
from carehome.application.dto.staff_dto import StaffCreateRequest
from carehome.application.errors import CareHomeError, ValidationError
from carehome.application.security.guards import AccessGuard
from carehome.application.services.admission_service import AdmissionService
from carehome.application.services.clinical_service import ClinicalService
from carehome.application.services.compliance_service import ComplianceService
from carehome.application.services.roster_service import RosterService
from carehome.application.services.staff_service import StaffService
from carehome.domain.models.facility import Bed
from carehome.domain.models.patient import MedicationRecord, Patient, Prescription
from carehome.domain.models.staff import Staff

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CareHomeCommands:
    """Entry points for a presentation layer.

    Every command returns a ``CommandResult``; domain failures come back as
    ``result.error`` instead of being raised. Request payloads may be given as
    DTOs or as plain dicts; the caller's capability is checked before a
    payload is parsed.
    """

    def __init__(
        self,
        staff_service: StaffService,
        admission_service: AdmissionService,
        clinical_service: ClinicalService,
        roster_service: RosterService,
        compliance_service: ComplianceService,
        guard: AccessGuard,
    ) -> None:
        self.staff_service = staff_service
        self.admission_service = admission_service
        self.clinical_service = clinical_service
        self.roster_service = roster_service
        self.compliance_service = compliance_service
        self.guard = guard

    def authenticate(self, username: str, password: str) -> CommandResult[Staff]:
        return _run(lambda: self._require_login(username, password))

    def admit_patient(
        self,
        patient: PatientAdmissionRequest | dict[str, Any],
        bed_id: str,
        staff_id: str,
    ) -> CommandResult[Patient]:
        return _run(
            lambda: self.admission_service.admit(
                self._parse_as(staff_id, "add_patient", PatientAdmissionRequest, patient), bed_id, staff_id
            )
        )

    def transfer_patient(self, patient_id: str, new_bed_id: str, staff_id: str) -> CommandResult[Bed]:
        return _run(lambda: self.admission_service.transfer(patient_id, new_bed_id, staff_id))

    def discharge_patient(
        self,
        patient_id: str,
        reason: str,
        notes: str,
        staff_id: str,
    ) -> CommandResult[PatientArchiveSnapshot]:
        return _run(lambda: self.admission_service.discharge(patient_id, reason, notes, staff_id))

    def add_prescription(
        self,
        patient_id: str,
        prescription: PrescriptionRequest | dict[str, Any],
        doctor_id: str,
    ) -> CommandResult[Prescription]:
        return _run(
            lambda: self.clinical_service.add_prescription(
                patient_id,
                self._parse_as(doctor_id, "add_prescription", PrescriptionRequest, prescription),
                doctor_id,
            )
        )

    def administer_medication(
        self,
        patient_id: str,
        record: MedicationAdministrationRequest | dict[str, Any],
        nurse_id: str,
    ) -> CommandResult[MedicationRecord]:
        return _run(
            lambda: self.clinical_service.administer_medication(
                patient_id,
                self._parse_as(nurse_id, "administer_medication", MedicationAdministrationRequest, record),
                nurse_id,
            )
        )

    def add_staff(self, request: StaffCreateRequest | dict[str, Any], manager_id: str) -> CommandResult[Staff]:
        return _run(
            lambda: self.staff_service.add_staff(
                self._parse_as(manager_id, "add_staff", StaffCreateRequest, request), manager_id
            )
        )

    def assign_shift(
        self,
        actor_id: str,
        staff_id: str,
        day: str,
        slot: str,
        replace: bool = False,
    ) -> CommandResult[list[str]]:
        return _run(lambda: self.roster_service.assign_shift(actor_id, staff_id, day, slot, replace=replace))

    def check_compliance(self) -> CommandResult[None]:
        return _run(self.compliance_service.check_compliance)

    def generate_compliance_report(self) -> CommandResult[str]:
        return _run(self.compliance_service.generate_compliance_report)

    def _require_login(self, username: str, password: str) -> Staff:
        member = self.staff_service.authenticate(username, password)
        if member is None:
            raise ValidationError("username", "Invalid username or password")
        return member

    def _parse_as(self, staff_id: str, action: str, model: type[T], payload: Any) -> T:
        self.guard.require_capability(staff_id, action)
        return _parse(model, payload)


def _parse(model: type[T], payload: Any) -> T:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)  # type: ignore[attr-defined]
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or model.__name__
        raise ValidationError(field, first.get("msg", str(exc))) from exc


def _run(operation: Callable[[], T]) -> CommandResult[T]:
    try:
        return CommandResult.success(operation())
    except CareHomeError as exc:
        logger.info("Command failed: %s: %s", exc.kind.value, exc)
        return CommandResult.failure(exc)
