from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from carehome.infrastructure.db.models_sqlalchemy import AuditLog


class AuditLogRepository:
    def add_event(
        self,
        session: Session,
        *,
        staff_id: str,
        action: str,
        details: str | None = None,
        event_ts: datetime | None = None,
    ) -> AuditLog:
        entry = AuditLog(staff_id=staff_id, action=action, details=details)
        if event_ts is not None:
            entry.event_ts = event_ts
        session.add(entry)
        return entry

    def list_events(
        self,
        session: Session,
        *,
        staff_id: str | None = None,
        action: str | None = None,
        limit: int = 200,
    ) -> list[AuditLog]:
        stmt = select(AuditLog)
        if staff_id is not None:
            stmt = stmt.where(AuditLog.staff_id == staff_id)
        if action is not None:
            stmt = stmt.where(AuditLog.action == action)
        stmt = stmt.order_by(AuditLog.event_ts.desc(), AuditLog.id.desc()).limit(limit)
        return list(session.execute(stmt).scalars())
