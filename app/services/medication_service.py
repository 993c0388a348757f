"""Medication service - prescriptions recorded against a child."""

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import Child, Medication


class InvalidMedicationError(ValueError):
    """Medication data failed validation."""


def add_medication(
    db: Session,
    child: Child,
    health_issue: str,
    medicine_name: str,
    dosage: str,
    frequency: str,
    duration: str,
    doctor_name: str,
    prescribed_date: date,
    today: date,
    doctor_contact: str | None = None,
    notes: str | None = None,
) -> Medication:
    """Record a prescription. The caller commits."""
    if prescribed_date > today:
        raise InvalidMedicationError("Prescribed date cannot be in the future")

    medication = Medication(
        child_id=child.id,
        health_issue=health_issue.strip(),
        medicine_name=medicine_name.strip(),
        dosage=dosage.strip(),
        frequency=frequency.strip(),
        duration=duration.strip(),
        doctor_name=doctor_name.strip(),
        doctor_contact=(doctor_contact or "").strip() or None,
        prescribed_date=prescribed_date,
        notes=notes or None,
    )
    db.add(medication)
    db.flush()
    return medication


def list_medications(db: Session, child_id: UUID) -> list[Medication]:
    """Medications for a child, most recently prescribed first."""
    return list(
        db.scalars(
            select(Medication)
            .where(Medication.child_id == child_id)
            .order_by(Medication.prescribed_date.desc(), Medication.medicine_name)
        ).all()
    )
