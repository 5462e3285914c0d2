from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from carehome.application.security.authenticator import Authenticator
from carehome.application.services.demo_seed import seed_sample_data
from carehome.domain.constants import SYSTEM_ACTOR, AuditAction
from carehome.domain.models.care_home import CareHomeState
from carehome.infrastructure.audit.audit_journal import AuditJournal
from carehome.infrastructure.snapshot.snapshot_codec import decode_state, encode_state
from carehome.infrastructure.snapshot.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class SnapshotService:
    """Save and restore the whole engine state.

    Loading swaps the contents of the shared ``CareHomeState`` in place so every
    service holding it sees the restored data.
    """

    def __init__(
        self,
        state: CareHomeState,
        store: SnapshotStore,
        audit: AuditJournal,
        authenticator: Authenticator | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.state = state
        self.store = store
        self.audit = audit
        self.authenticator = authenticator
        self.clock = clock

    def save(self, actor_id: str = SYSTEM_ACTOR) -> Path:
        blob = encode_state(self.state, saved_at=self.clock())
        path = self.store.write(blob)
        self.audit.log(actor_id, AuditAction.SAVE_DATA, f"Saved all system data to {path.name}")
        return path

    def load(self, actor_id: str = SYSTEM_ACTOR) -> bool:
        blob = self.store.read()
        if blob is None:
            return False
        restored = decode_state(blob)
        self.state.facility = restored.facility
        self.state.staff = restored.staff
        self.state.patients = restored.patients
        logger.info(
            "Snapshot loaded: %d staff, %d patients", len(restored.staff), len(restored.patients)
        )
        self.audit.log(actor_id, AuditAction.LOAD_DATA, f"Loaded system data from {self.store.file_path.name}")
        return True

    def load_or_seed(self) -> bool:
        """Load the saved snapshot, or seed demo data and save it. Returns True when a snapshot was loaded."""
        if self.load():
            return True
        if seed_sample_data(self.state, self.audit, self.authenticator, clock=self.clock):
            self.save()
        return False
