from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from carehome.application.security.authenticator import Authenticator, build_authenticator
from carehome.application.security.guards import AccessGuard
from carehome.application.services.admission_service import AdmissionService
from carehome.application.services.clinical_service import ClinicalService
from carehome.application.services.commands import CareHomeCommands
from carehome.application.services.compliance_service import ComplianceService
from carehome.application.services.reporting_service import ReportingService
from carehome.application.services.roster_service import RosterService
from carehome.application.services.snapshot_service import SnapshotService
from carehome.application.services.staff_service import StaffService
from carehome.config import ArchiveFailurePolicy, settings
from carehome.domain.models.care_home import CareHomeState
from carehome.infrastructure.archive.discharge_archive import DischargeArchive, SqlDischargeArchive
from carehome.infrastructure.audit.audit_journal import AuditJournal, SqlAuditJournal
from carehome.infrastructure.db.session import session_scope
from carehome.infrastructure.snapshot.snapshot_store import SnapshotStore


@dataclass
class Container:
    state: CareHomeState
    audit: AuditJournal
    archive: DischargeArchive
    authenticator: Authenticator
    guard: AccessGuard

    staff_service: StaffService
    admission_service: AdmissionService
    clinical_service: ClinicalService
    roster_service: RosterService
    compliance_service: ComplianceService
    reporting_service: ReportingService
    snapshot_service: SnapshotService
    commands: CareHomeCommands


def build_container(
    *,
    state: CareHomeState | None = None,
    session_factory: Callable = session_scope,
    audit: AuditJournal | None = None,
    archive: DischargeArchive | None = None,
    snapshot_file: str | Path | None = None,
    archive_failure_policy: ArchiveFailurePolicy | None = None,
    password_scheme: str | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> Container:
    state = state or CareHomeState()
    audit = audit or SqlAuditJournal(session_factory=session_factory, clock=clock)
    archive = archive or SqlDischargeArchive(session_factory=session_factory, clock=clock)
    authenticator = build_authenticator(password_scheme or settings.password_scheme)
    guard = AccessGuard(state, audit, clock=clock)

    staff_service = StaffService(state, guard, audit, authenticator=authenticator, clock=clock)
    admission_service = AdmissionService(
        state,
        guard,
        audit,
        archive,
        archive_failure_policy=archive_failure_policy,
        clock=clock,
    )
    clinical_service = ClinicalService(state, guard, audit)
    roster_service = RosterService(state, guard, audit)
    compliance_service = ComplianceService(state, clock=clock)
    reporting_service = ReportingService(compliance_service)
    snapshot_service = SnapshotService(
        state,
        SnapshotStore(snapshot_file or settings.snapshot_file),
        audit,
        authenticator=authenticator,
        clock=clock,
    )
    commands = CareHomeCommands(
        staff_service=staff_service,
        admission_service=admission_service,
        clinical_service=clinical_service,
        roster_service=roster_service,
        compliance_service=compliance_service,
        guard=guard,
    )

    return Container(
        state=state,
        audit=audit,
        archive=archive,
        authenticator=authenticator,
        guard=guard,
        staff_service=staff_service,
        admission_service=admission_service,
        clinical_service=clinical_service,
        roster_service=roster_service,
        compliance_service=compliance_service,
        reporting_service=reporting_service,
        snapshot_service=snapshot_service,
        commands=commands,
    )
