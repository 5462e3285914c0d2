from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from carehome.application.security.authenticator import Authenticator, PlaintextAuthenticator
from carehome.domain.constants import SYSTEM_ACTOR, AuditAction, ShiftSlot, StaffRole, Weekday
from carehome.domain.models.care_home import CareHomeState
from carehome.domain.models.patient import Medication, Patient, Prescription
from carehome.domain.models.staff import Staff
from carehome.infrastructure.audit.audit_journal import AuditJournal

logger = logging.getLogger(__name__)

# staff_id, name, email, phone, username, password, role, qualification
SAMPLE_STAFF: tuple[tuple[str, str, str, str, str, str, StaffRole, str], ...] = (
    ("MGR001", "John Manager", "manager@carehome.com", "0123456789", "admin", "admin123", StaffRole.MANAGER, ""),
    (
        "DOC001", "Dr. Sarah Wilson", "sarah@carehome.com", "0123456788", "doctor1", "doc123",
        StaffRole.DOCTOR, "General Medicine",
    ),
    (
        "DOC002", "Dr. Mike Johnson", "mike@carehome.com", "0123456787", "doctor2", "doc123",
        StaffRole.DOCTOR, "Cardiology",
    ),
    ("NUR001", "Emma Thompson", "emma@carehome.com", "0123456786", "nurse1", "nur123", StaffRole.NURSE, "RN"),
    ("NUR002", "James Brown", "james@carehome.com", "0123456785", "nurse2", "nur123", StaffRole.NURSE, "LPN"),
    ("NUR003", "Lisa Davis", "lisa@carehome.com", "0123456784", "nurse3", "nur123", StaffRole.NURSE, "RN"),
)

# patient_id, name, email, phone, date_of_birth, gender, condition, isolation, bed_id
SAMPLE_PATIENTS: tuple[tuple[str, str, str, str, date, str, str, bool, str], ...] = (
    ("PAT001", "Alice Johnson", "alice.j@email.com", "0412345678", date(1945, 5, 12), "F", "Hypertension", False,
     "W1-R1-B1"),
    ("PAT002", "Bob Smith", "bob.s@email.com", "0423456789", date(1950, 8, 20), "M", "Diabetes Type 2", False,
     "W1-R2-B1"),
    ("PAT003", "Carol White", "carol.w@email.com", "0434567890", date(1938, 3, 15), "F", "Pneumonia", True,
     "W1-R3-B1"),
    ("PAT004", "David Brown", "david.b@email.com", "0445678901", date(1955, 11, 8), "M", "Heart Disease", False,
     "W1-R4-B1"),
    ("PAT005", "Emma Davis", "emma.d@email.com", "0456789012", date(1942, 7, 25), "F", "Arthritis", False,
     "W1-R5-B1"),
    ("PAT006", "Frank Miller", "frank.m@email.com", "0467890123", date(1948, 2, 18), "M", "COPD", False,
     "W2-R2-B1"),
)

SAMPLE_PRESCRIPTIONS: tuple[tuple[str, str, str, str, tuple[Medication, ...]], ...] = (
    (
        "RX001", "PAT001", "DOC001", "Blood pressure management",
        (
            Medication("Amlodipine", "5mg", "Once daily", "08:00", "Take with water"),
            Medication("Lisinopril", "10mg", "Once daily", "08:00", "Take in the morning"),
        ),
    ),
    (
        "RX002", "PAT002", "DOC002", "Diabetes management",
        (
            Medication("Metformin", "500mg", "Twice daily", "08:00, 20:00", "Take with meals"),
            Medication("Insulin", "20 units", "Before meals", "07:00, 12:00, 18:00", "Inject subcutaneously"),
        ),
    ),
    (
        "RX003", "PAT003", "DOC001", "Antibiotic treatment",
        (Medication("Amoxicillin", "500mg", "Three times daily", "08:00, 14:00, 20:00", "Take with food"),),
    ),
)


def seed_sample_data(
    state: CareHomeState,
    audit: AuditJournal,
    authenticator: Authenticator | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> bool:
    """Populate an empty care home with demo staff and patients. Returns True when anything was added."""
    authenticator = authenticator or PlaintextAuthenticator()
    seeded = False

    if len(state.staff) == 0:
        for staff_id, name, email, phone, username, password, role, qualification in SAMPLE_STAFF:
            member = Staff(
                staff_id=staff_id,
                name=name,
                email=email,
                phone=phone,
                username=username,
                password=authenticator.prepare(password),
                role=role,
                qualification=qualification,
            )
            if role == StaffRole.NURSE:
                slot = ShiftSlot.NURSE_MORNING.value
            elif role == StaffRole.DOCTOR:
                slot = ShiftSlot.DOCTOR_HOUR.value
            else:
                slot = None
            if slot is not None:
                for day in Weekday.values():
                    member.add_shift(day, slot)
            state.staff.add(member)
        audit.log(SYSTEM_ACTOR, AuditAction.CREATE_SAMPLE_DATA, "Created sample staff and shift assignments")
        seeded = True

    if len(state.patients) == 0:
        patients: dict[str, Patient] = {}
        for patient_id, name, email, phone, dob, gender, condition, isolation, bed_id in SAMPLE_PATIENTS:
            bed = state.facility.find_bed(bed_id)
            if bed is None or bed.occupied:
                logger.warning("Sample bed %s unavailable; skipping %s", bed_id, patient_id)
                continue
            patient = Patient(
                patient_id=patient_id,
                name=name,
                email=email,
                phone=phone,
                date_of_birth=dob,
                gender=gender,
                medical_condition=condition,
                requires_isolation=isolation,
                bed_id=bed_id,
            )
            state.facility.occupy(bed, patient_id)
            state.patients.add(patient)
            patients[patient_id] = patient

        for prescription_id, patient_id, doctor_id, notes, medications in SAMPLE_PRESCRIPTIONS:
            owner = patients.get(patient_id)
            if owner is None:
                continue
            owner.add_prescription(
                Prescription(
                    prescription_id=prescription_id,
                    patient_id=patient_id,
                    doctor_id=doctor_id,
                    notes=notes,
                    created_at=clock(),
                    medications=list(medications),
                )
            )
        audit.log(
            SYSTEM_ACTOR,
            AuditAction.CREATE_SAMPLE_DATA,
            f"Created {len(patients)} sample patients with prescriptions",
        )
        seeded = seeded or bool(patients)

    return seeded
