from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.sql import expression

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    # avoid constraint_name token to allow unnamed CheckConstraint
    "ck": "ck_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=naming_convention)


class Base(DeclarativeBase):
    metadata = metadata


def local_now() -> datetime:
    return datetime.now()


class AuditLog(Base):
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True)
    event_ts = Column(DateTime, nullable=False, default=local_now)
    staff_id = Column(String, nullable=False)
    action = Column(String, nullable=False)
    details = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_audit_log_staff_id_event_ts", "staff_id", "event_ts"),
    )


class DischargedPatient(Base):
    __tablename__ = "discharged_patients"

    patient_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String)
    phone = Column(String)
    date_of_birth = Column(Date)
    gender = Column(String, nullable=False)
    age = Column(Integer)
    medical_condition = Column(Text)
    requires_isolation = Column(Boolean, nullable=False, server_default=expression.false())
    bed_id = Column(String)
    discharge_date = Column(DateTime, nullable=False, default=local_now)
    discharge_reason = Column(Text)
    discharge_notes = Column(Text)
    discharged_by = Column(String, nullable=False)

    prescriptions = relationship(
        "ArchivedPrescription",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="ArchivedPrescription.prescription_date",
    )
    medication_records = relationship(
        "ArchivedMedicationRecord",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="ArchivedMedicationRecord.administration_time",
    )

    __table_args__ = (
        CheckConstraint("gender in ('M','F')", name="ck_discharged_patients_gender"),
    )


class ArchivedPrescription(Base):
    __tablename__ = "archived_prescriptions"

    prescription_id = Column(String, primary_key=True)
    patient_id = Column(String, ForeignKey("discharged_patients.patient_id", ondelete="CASCADE"), nullable=False)
    doctor_id = Column(String, nullable=False)
    prescription_date = Column(DateTime, nullable=False)
    notes = Column(Text)
    archived_date = Column(DateTime, nullable=False, default=local_now)

    patient = relationship("DischargedPatient", back_populates="prescriptions")
    medications = relationship(
        "ArchivedMedication",
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="ArchivedMedication.id",
    )


class ArchivedMedication(Base):
    __tablename__ = "archived_medications"

    id = Column(Integer, primary_key=True)
    prescription_id = Column(
        String, ForeignKey("archived_prescriptions.prescription_id", ondelete="CASCADE"), nullable=False
    )
    medication_name = Column(String, nullable=False)
    dosage = Column(String, nullable=False)
    frequency = Column(String, nullable=False)
    administration_time = Column(String)
    instructions = Column(Text)

    prescription = relationship("ArchivedPrescription", back_populates="medications")


class ArchivedMedicationRecord(Base):
    __tablename__ = "archived_medication_records"

    record_id = Column(String, primary_key=True)
    patient_id = Column(String, ForeignKey("discharged_patients.patient_id", ondelete="CASCADE"), nullable=False)
    nurse_id = Column(String, nullable=False)
    medication_name = Column(String, nullable=False)
    dosage_given = Column(String, nullable=False)
    administration_time = Column(DateTime, nullable=False)
    administered = Column(Boolean, nullable=False)
    notes = Column(Text)
    archived_date = Column(DateTime, nullable=False, default=local_now)

    patient = relationship("DischargedPatient", back_populates="medication_records")
