"""Doctor service - profiles, admin review and discovery."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import DoctorStatus
from app.db.models import Doctor

logger = logging.getLogger(__name__)


class DoctorServiceError(Exception):
    """Base exception for doctor service errors."""

    pass


class DoctorNotFoundError(DoctorServiceError):
    """Doctor profile not found."""

    pass


class DoctorProfileExistsError(DoctorServiceError):
    """User already has a doctor profile."""

    pass


class InvalidDoctorTransitionError(DoctorServiceError):
    """Review action not allowed from the current status."""

    pass


# =============================================================================
# Profiles
# =============================================================================

def submit_profile(
    db: Session,
    user_id: UUID,
    specialization: str,
    qualification: str,
    location: str,
    experience_years: int = 0,
    consultation_fee: Decimal | None = None,
    bio: str | None = None,
) -> Doctor:
    """Create a doctor profile awaiting admin review."""
    if get_doctor_by_user(db, user_id):
        raise DoctorProfileExistsError("Doctor profile already submitted")

    doctor = Doctor(
        user_id=user_id,
        specialization=specialization.strip(),
        qualification=qualification.strip(),
        location=location.strip(),
        experience_years=experience_years,
        consultation_fee=consultation_fee,
        bio=bio,
        status=DoctorStatus.PENDING.value,
    )
    db.add(doctor)
    db.flush()
    logger.info(
        "Doctor profile submitted",
        extra=build_log_context(user_id=str(user_id), doctor_id=str(doctor.id)),
    )
    return doctor


def get_doctor(db: Session, doctor_id: UUID) -> Doctor | None:
    return db.get(Doctor, doctor_id)


def get_doctor_by_user(db: Session, user_id: UUID) -> Doctor | None:
    return db.scalars(select(Doctor).where(Doctor.user_id == user_id)).first()


def get_active_doctor(db: Session, doctor_id: UUID) -> Doctor | None:
    return db.scalars(
        select(Doctor).where(
            Doctor.id == doctor_id,
            Doctor.status == DoctorStatus.ACTIVE.value,
        )
    ).first()


# =============================================================================
# Admin Review
# =============================================================================

def list_applications(db: Session, status: DoctorStatus | None = None) -> list[Doctor]:
    query = select(Doctor).order_by(Doctor.created_at.desc())
    if status:
        query = query.where(Doctor.status == status.value)
    return list(db.scalars(query).all())


def _require_doctor(db: Session, doctor_id: UUID) -> Doctor:
    doctor = get_doctor(db, doctor_id)
    if not doctor:
        raise DoctorNotFoundError(f"Doctor {doctor_id} not found")
    return doctor


def approve_doctor(db: Session, doctor_id: UUID) -> Doctor:
    doctor = _require_doctor(db, doctor_id)
    if doctor.status not in (DoctorStatus.PENDING.value, DoctorStatus.SUSPENDED.value):
        raise InvalidDoctorTransitionError(f"Cannot approve doctor with status {doctor.status}")
    doctor.status = DoctorStatus.ACTIVE.value
    doctor.rejection_reason = None
    db.flush()
    return doctor


def reject_doctor(db: Session, doctor_id: UUID, reason: str | None = None) -> Doctor:
    doctor = _require_doctor(db, doctor_id)
    if doctor.status != DoctorStatus.PENDING.value:
        raise InvalidDoctorTransitionError(f"Cannot reject doctor with status {doctor.status}")
    doctor.status = DoctorStatus.REJECTED.value
    doctor.rejection_reason = reason
    db.flush()
    return doctor


def suspend_doctor(db: Session, doctor_id: UUID) -> Doctor:
    doctor = _require_doctor(db, doctor_id)
    if doctor.status != DoctorStatus.ACTIVE.value:
        raise InvalidDoctorTransitionError(f"Cannot suspend doctor with status {doctor.status}")
    doctor.status = DoctorStatus.SUSPENDED.value
    db.flush()
    return doctor


# =============================================================================
# Discovery
# =============================================================================

def search_doctors(
    db: Session,
    location: str | None = None,
    specialization: str | None = None,
) -> list[Doctor]:
    """
    Active doctors, newest first.

    location matches case-insensitively anywhere in the doctor's location;
    specialization must match exactly.
    """
    query = select(Doctor).where(Doctor.status == DoctorStatus.ACTIVE.value)
    if location and location.strip():
        query = query.where(
            func.lower(Doctor.location).contains(location.strip().lower())
        )
    if specialization:
        query = query.where(Doctor.specialization == specialization)
    return list(db.scalars(query.order_by(Doctor.created_at.desc())).all())


def list_specializations(db: Session) -> list[str]:
    return list(
        db.scalars(
            select(Doctor.specialization)
            .where(Doctor.status == DoctorStatus.ACTIVE.value)
            .distinct()
            .order_by(Doctor.specialization)
        ).all()
    )
