"""Appointments router - availability slots, booking and lifecycle.

Doctors publish and remove their own slots and move appointments through
their lifecycle; any authenticated user books for themself or one of
their children.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from app.db.enums import AppointmentStatus, Role
from app.schemas.appointment import (
    AppointmentRead,
    AppointmentStatusUpdate,
    BookingCreate,
    SlotCreate,
    SlotRead,
)
from app.schemas.auth import UserSession
from app.services import appointment_service, doctor_service
from app.services.appointment_service import Beneficiary
from app.utils.dates import today_in_timezone

router = APIRouter()

require_doctor = require_roles([Role.DOCTOR])


def _own_doctor(db: Session, session: UserSession):
    """Doctor profile of the caller, or 403."""
    doctor = doctor_service.get_doctor_by_user(db, session.user_id)
    if not doctor:
        raise HTTPException(status_code=403, detail="Doctor profile required")
    return doctor


# =============================================================================
# Availability Slots (doctor)
# =============================================================================

@router.get("/slots", response_model=list[SlotRead])
def list_my_slots(
    session: UserSession = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    doctor = _own_doctor(db, session)
    return appointment_service.list_slots(db, doctor.id)


@router.post(
    "/slots",
    response_model=SlotRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_slot(
    data: SlotCreate,
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    doctor = _own_doctor(db, session)
    try:
        slot = appointment_service.create_slot(
            db=db,
            doctor_id=doctor.id,
            available_date=data.available_date,
            start_time=data.start_time,
            end_time=data.end_time,
            today=today_in_timezone(tz),
        )
        db.commit()
    except appointment_service.InvalidSlotError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(slot)
    return slot


@router.delete(
    "/slots/{slot_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_slot(
    slot_id: UUID,
    session: UserSession = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    doctor = _own_doctor(db, session)
    try:
        appointment_service.delete_slot(db, doctor.id, slot_id)
        db.commit()
    except appointment_service.SlotNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Slot not found")
    except appointment_service.SlotAlreadyBookedError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    return None


# =============================================================================
# Booking
# =============================================================================

@router.post(
    "",
    response_model=AppointmentRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def book_appointment(
    data: BookingCreate,
    doctor_id: UUID = Query(...),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Book an open slot for yourself or one of your children."""
    if not doctor_service.get_active_doctor(db, doctor_id):
        raise HTTPException(status_code=404, detail="Doctor not found")

    beneficiary = Beneficiary(child_id=data.child_id, is_self=data.is_self_booking)
    try:
        return appointment_service.book_appointment(
            db=db,
            doctor_id=doctor_id,
            requester_id=session.user_id,
            slot_id=data.slot_id,
            beneficiary=beneficiary,
            notes=data.notes,
        )
    except appointment_service.InvalidBeneficiaryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except appointment_service.SlotNotFoundError:
        raise HTTPException(status_code=404, detail="Slot not found")
    except appointment_service.SlotAlreadyBookedError as e:
        raise HTTPException(status_code=409, detail=str(e))


# =============================================================================
# Appointments
# =============================================================================

@router.get("", response_model=list[AppointmentRead])
def list_my_appointments(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Appointments the caller booked."""
    return appointment_service.list_appointments_for_parent(db, session.user_id)


@router.get("/doctor", response_model=list[AppointmentRead])
def list_doctor_appointments(
    status: AppointmentStatus | None = Query(None),
    session: UserSession = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    """Appointments booked with the calling doctor."""
    doctor = _own_doctor(db, session)
    return appointment_service.list_appointments_for_doctor(db, doctor.id, status)


@router.get("/{appointment_id}", response_model=AppointmentRead)
def get_appointment(
    appointment_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    doctor = doctor_service.get_doctor_by_user(db, session.user_id)
    appointment = appointment_service.get_appointment(
        db, appointment_id, session.user_id, doctor.id if doctor else None
    )
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.patch(
    "/{appointment_id}/status",
    response_model=AppointmentRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    session: UserSession = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    """Move an appointment along pending -> confirmed -> completed."""
    doctor = _own_doctor(db, session)
    appointment = appointment_service.get_appointment(
        db, appointment_id, session.user_id, doctor.id
    )
    if not appointment or appointment.doctor_id != doctor.id:
        raise HTTPException(status_code=404, detail="Appointment not found")
    try:
        appointment_service.update_status(db, appointment, data.status)
        db.commit()
    except appointment_service.InvalidStatusTransitionError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    db.refresh(appointment)
    return appointment
