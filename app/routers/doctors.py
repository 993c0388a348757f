"""Doctors router - discovery, applications and admin review."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from app.db.enums import DoctorStatus, Role
from app.schemas.appointment import SlotRead
from app.schemas.auth import UserSession
from app.schemas.doctor import DoctorProfileCreate, DoctorRead, DoctorReject
from app.services import appointment_service, doctor_service
from app.utils.dates import today_in_timezone

router = APIRouter()

require_doctor = require_roles([Role.DOCTOR])
require_admin = require_roles([Role.ADMIN])


def _doctor_to_read(doctor) -> DoctorRead:
    """Convert Doctor model to read schema."""
    return DoctorRead(
        id=doctor.id,
        user_id=doctor.user_id,
        display_name=doctor.user.display_name,
        specialization=doctor.specialization,
        qualification=doctor.qualification,
        experience_years=doctor.experience_years,
        location=doctor.location,
        consultation_fee=doctor.consultation_fee,
        bio=doctor.bio,
        status=doctor.status,
        rejection_reason=doctor.rejection_reason,
        created_at=doctor.created_at,
    )


# =============================================================================
# Discovery
# =============================================================================

@router.get("", response_model=list[DoctorRead])
def search_doctors(
    location: str | None = Query(None, max_length=255),
    specialization: str | None = Query(None, max_length=100),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Active doctors filtered by location and specialization."""
    doctors = doctor_service.search_doctors(db, location=location, specialization=specialization)
    return [_doctor_to_read(d) for d in doctors]


@router.get("/specializations", response_model=list[str])
def list_specializations(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return doctor_service.list_specializations(db)


# =============================================================================
# Own Profile (doctor)
# =============================================================================

@router.get("/me", response_model=DoctorRead)
def get_my_profile(
    session: UserSession = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    doctor = doctor_service.get_doctor_by_user(db, session.user_id)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor profile not found")
    return _doctor_to_read(doctor)


@router.post(
    "/me",
    response_model=DoctorRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def submit_profile(
    data: DoctorProfileCreate,
    session: UserSession = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    """Submit a doctor application for admin review."""
    try:
        doctor = doctor_service.submit_profile(
            db=db,
            user_id=session.user_id,
            specialization=data.specialization,
            qualification=data.qualification,
            location=data.location,
            experience_years=data.experience_years,
            consultation_fee=data.consultation_fee,
            bio=data.bio,
        )
        db.commit()
    except doctor_service.DoctorProfileExistsError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    db.refresh(doctor)
    return _doctor_to_read(doctor)


# =============================================================================
# Admin Review
# =============================================================================

@router.get("/applications", response_model=list[DoctorRead])
def list_applications(
    status: DoctorStatus | None = Query(None),
    session: UserSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return [_doctor_to_read(d) for d in doctor_service.list_applications(db, status)]


def _review(db: Session, action, *args):
    try:
        doctor = action(db, *args)
        db.commit()
    except doctor_service.DoctorNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except doctor_service.InvalidDoctorTransitionError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    db.refresh(doctor)
    return _doctor_to_read(doctor)


@router.post(
    "/{doctor_id}/approve",
    response_model=DoctorRead,
    dependencies=[Depends(require_csrf_header)],
)
def approve_doctor(
    doctor_id: UUID,
    session: UserSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _review(db, doctor_service.approve_doctor, doctor_id)


@router.post(
    "/{doctor_id}/reject",
    response_model=DoctorRead,
    dependencies=[Depends(require_csrf_header)],
)
def reject_doctor(
    doctor_id: UUID,
    data: DoctorReject,
    session: UserSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _review(db, doctor_service.reject_doctor, doctor_id, data.reason)


@router.post(
    "/{doctor_id}/suspend",
    response_model=DoctorRead,
    dependencies=[Depends(require_csrf_header)],
)
def suspend_doctor(
    doctor_id: UUID,
    session: UserSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _review(db, doctor_service.suspend_doctor, doctor_id)


# =============================================================================
# Public Profile
# =============================================================================

@router.get("/{doctor_id}", response_model=DoctorRead)
def get_doctor(
    doctor_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    doctor = doctor_service.get_active_doctor(db, doctor_id)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return _doctor_to_read(doctor)


@router.get("/{doctor_id}/slots", response_model=list[SlotRead])
def list_open_slots(
    doctor_id: UUID,
    from_date: date | None = Query(None),
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Open slots of an active doctor from from_date (default today)."""
    if not doctor_service.get_active_doctor(db, doctor_id):
        raise HTTPException(status_code=404, detail="Doctor not found")
    start = from_date or today_in_timezone(tz)
    return appointment_service.fetch_open_slots(db, doctor_id, start)
