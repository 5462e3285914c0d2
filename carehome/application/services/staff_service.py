from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from carehome.application.dto.staff_dto import LoginRequest, SessionContext, StaffCreateRequest
from carehome.application.errors import NotFoundError, ValidationError
from carehome.application.security.authenticator import Authenticator, PlaintextAuthenticator
from carehome.application.security.guards import AccessGuard
from carehome.domain.constants import AuditAction, StaffRole
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.staff import Staff
from carehome.domain.rules.roster_rules import is_rostered_at, roster_day
from carehome.infrastructure.audit.audit_journal import AuditJournal


class StaffService:
    def __init__(
        self,
        state: CareHomeState,
        guard: AccessGuard,
        audit: AuditJournal,
        authenticator: Authenticator | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.state = state
        self.guard = guard
        self.audit = audit
        self.authenticator = authenticator or PlaintextAuthenticator()
        self.clock = clock

    def authenticate(self, username: str, password: str) -> Staff | None:
        for member in self.state.staff.list():
            if member.username == username and self.authenticator.verify(member, password):
                self.audit.log(member.staff_id, AuditAction.LOGIN, f"{member.role.value} {member.name} logged in")
                return member
        return None

    def login(self, request: LoginRequest) -> SessionContext:
        member = self.authenticate(request.username, request.password)
        if member is None:
            raise ValidationError("username", "Invalid username or password")
        return SessionContext(
            staff_id=member.staff_id,
            username=member.username,
            role=member.role,
            on_duty=is_rostered_at(member, self.clock()),
            today_shifts=self.today_shifts(member.staff_id),
        )

    def add_staff(self, request: StaffCreateRequest | Staff, manager_id: str) -> Staff:
        self.guard.require_capability(manager_id, "add_staff")
        staff = request.to_staff() if isinstance(request, StaffCreateRequest) else request
        if staff.staff_id in self.state.staff:
            raise ValidationError("staff_id", f"Staff {staff.staff_id} already exists")
        if self.state.staff.find_by_username(staff.username) is not None:
            raise ValidationError("username", f"Username {staff.username} is already taken")
        staff.password = self.authenticator.prepare(staff.password)

        self.state.staff.add(staff)
        self.audit.log(
            manager_id,
            AuditAction.ADD_STAFF,
            f"Added {staff.role.value} {staff.name} (ID: {staff.staff_id})",
        )
        return staff

    def get_staff(self, staff_id: str) -> Staff:
        member = self.state.staff.get(staff_id)
        if member is None:
            raise NotFoundError("staff", staff_id)
        return member

    def list_staff(self, role: StaffRole | str | None = None) -> list[Staff]:
        return self.state.staff.list(StaffRole(role) if role is not None else None)

    def shifts_for_day(self, staff_id: str, day: str) -> list[str]:
        return self.get_staff(staff_id).shifts_for_day(day)

    def today_shifts(self, staff_id: str) -> list[str]:
        return self.get_staff(staff_id).shifts_for_day(roster_day(self.clock()))

    def is_rostered_now(self, staff_id: str) -> bool:
        return is_rostered_at(self.get_staff(staff_id), self.clock())
