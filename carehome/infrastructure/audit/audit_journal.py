from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError

from carehome.infrastructure.db.repositories.audit_repo import AuditLogRepository
from carehome.infrastructure.db.session import session_scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuditRecord:
    staff_id: str
    action: str
    details: str
    timestamp: datetime = field(default_factory=datetime.now)


class AuditJournal(Protocol):
    def log(self, staff_id: str, action: str, details: str) -> None: ...

    def list_events(
        self,
        staff_id: str | None = None,
        action: str | None = None,
        limit: int = 200,
    ) -> list[AuditRecord]: ...


class InMemoryAuditJournal:
    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self.clock = clock
        self.records: list[AuditRecord] = []

    def log(self, staff_id: str, action: str, details: str) -> None:
        self.records.append(AuditRecord(staff_id=staff_id, action=action, details=details, timestamp=self.clock()))

    def list_events(
        self,
        staff_id: str | None = None,
        action: str | None = None,
        limit: int = 200,
    ) -> list[AuditRecord]:
        matched = [
            record
            for record in reversed(self.records)
            if (staff_id is None or record.staff_id == staff_id) and (action is None or record.action == action)
        ]
        return matched[:limit]

    def actions(self) -> list[str]:
        return [record.action for record in self.records]


class SqlAuditJournal:
    """Audit journal backed by the ``audit_log`` table.

    Writes are fire-and-forget: database failures are logged and never reach the caller.
    """

    def __init__(
        self,
        audit_repo: AuditLogRepository | None = None,
        session_factory: Callable = session_scope,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.audit_repo = audit_repo or AuditLogRepository()
        self.session_factory = session_factory
        self.clock = clock

    def log(self, staff_id: str, action: str, details: str) -> None:
        try:
            with self.session_factory() as session:
                self.audit_repo.add_event(
                    session,
                    staff_id=staff_id,
                    action=action,
                    details=details,
                    event_ts=self.clock(),
                )
        except SQLAlchemyError:
            logger.warning("Failed to write audit event %s for %s", action, staff_id, exc_info=True)

    def list_events(
        self,
        staff_id: str | None = None,
        action: str | None = None,
        limit: int = 200,
    ) -> list[AuditRecord]:
        with self.session_factory() as session:
            rows = self.audit_repo.list_events(session, staff_id=staff_id, action=action, limit=limit)
            return [
                AuditRecord(
                    staff_id=str(row.staff_id),
                    action=str(row.action),
                    details=str(row.details or ""),
                    timestamp=row.event_ts,
                )
                for row in rows
            ]
