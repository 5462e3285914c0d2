from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from carehome.application.errors import AuthorizationError, NotFoundError, RosterViolation
from carehome.application.security.role_matrix import has_capability
from carehome.domain.constants import AuditAction
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.staff import Staff
from carehome.domain.rules.roster_rules import is_rostered_at
from carehome.infrastructure.audit.audit_journal import AuditJournal

logger = logging.getLogger(__name__)


class AccessGuard:
    """Capability and roster gates shared by every mutating service."""

    def __init__(
        self,
        state: CareHomeState,
        audit: AuditJournal,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.state = state
        self.audit = audit
        self.clock = clock

    def require_staff(self, staff_id: str) -> Staff:
        member = self.state.staff.get(staff_id)
        if member is None:
            raise NotFoundError("staff", staff_id)
        return member

    def require_capability(self, staff_id: str, action: str) -> Staff:
        member = self.require_staff(staff_id)
        if not has_capability(member.role, action):
            self.audit.log(
                staff_id,
                AuditAction.ACCESS_DENIED,
                f"Attempted {action} as {member.role.value}",
            )
            logger.info("Access denied: %s (%s) -> %s", staff_id, member.role.value, action)
            raise AuthorizationError(staff_id, action, member.role.value)
        return member

    def require_rostered(self, member: Staff) -> datetime:
        now = self.clock()
        if not is_rostered_at(member, now):
            raise RosterViolation(member.staff_id, now, member.role.value)
        return now
