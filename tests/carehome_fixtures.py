from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from datetime import datetime
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from carehome.container import Container
from carehome.domain.constants import ShiftSlot, StaffRole, Weekday
from carehome.domain.models.patient import Patient
from carehome.domain.models.staff import Staff
from carehome.infrastructure.db.models_sqlalchemy import Base

# Monday 10:00 local time.
MONDAY_MORNING = datetime(2026, 10, 19, 10, 0)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def at_hour(self, hour: int) -> None:
        self.now = self.now.replace(hour=hour)


def make_session_factory(db_path: Path) -> Callable[[], AbstractContextManager[Session]]:
    engine = create_engine(f"sqlite:///{db_path.as_posix()}", future=True)
    Base.metadata.create_all(engine)
    session_local = sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True
    )

    @contextmanager
    def _session_scope() -> Iterator[Session]:
        session: Session = session_local()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return _session_scope


def make_staff(staff_id: str, role: StaffRole, slot: str | None = None, username: str | None = None) -> Staff:
    member = Staff(
        staff_id=staff_id,
        name=f"{role.value} {staff_id}",
        email=f"{staff_id.lower()}@carehome.com",
        phone="0123456789",
        username=username or staff_id.lower(),
        password="secret1",
        role=role,
    )
    if slot is not None:
        for day in Weekday.values():
            member.add_shift(day, slot)
    return member


def make_patient(patient_id: str, gender: str, name: str | None = None) -> Patient:
    return Patient(
        patient_id=patient_id,
        name=name or f"Patient {patient_id}",
        email="",
        phone="",
        date_of_birth=datetime(1950, 6, 1).date(),
        gender=gender,
        medical_condition="Observation",
    )


def add_core_staff(container: Container) -> None:
    container.state.staff.add(make_staff("MGR001", StaffRole.MANAGER))
    container.state.staff.add(make_staff("DOC001", StaffRole.DOCTOR, ShiftSlot.DOCTOR_HOUR.value))
    container.state.staff.add(make_staff("NUR001", StaffRole.NURSE, ShiftSlot.NURSE_MORNING.value))
