"""Appointment service - availability slots and booking.

Handles:
- Slot publishing and removal by doctors
- Open slot listing for patients
- Booking with slot-first compare-and-swap
- Appointment status transitions
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import APPOINTMENT_TRANSITIONS, AppointmentStatus
from app.db.models import Appointment, Child, DoctorAvailability

logger = logging.getLogger(__name__)


class AppointmentServiceError(Exception):
    """Base exception for appointment service errors."""

    pass


class InvalidSlotError(AppointmentServiceError):
    """Slot time range or date is invalid."""

    pass


class SlotNotFoundError(AppointmentServiceError):
    """Slot does not exist or belongs to another doctor."""

    pass


class SlotAlreadyBookedError(AppointmentServiceError):
    """Slot was taken by another booking."""

    pass


class InvalidBeneficiaryError(AppointmentServiceError):
    """Booking must name exactly one of: self, or one of the requester's children."""

    pass


class AppointmentNotFoundError(AppointmentServiceError):
    """Appointment not found for this caller."""

    pass


class InvalidStatusTransitionError(AppointmentServiceError):
    """Status change not allowed from the current status."""

    pass


@dataclass(frozen=True)
class Beneficiary:
    """Who the appointment is for: the requester themself or one child."""
    child_id: UUID | None = None
    is_self: bool = False

    @classmethod
    def self_booking(cls) -> "Beneficiary":
        return cls(is_self=True)

    @classmethod
    def for_child(cls, child_id: UUID) -> "Beneficiary":
        return cls(child_id=child_id)

    def validate(self) -> None:
        if self.is_self == (self.child_id is not None):
            raise InvalidBeneficiaryError(
                "Select either a child or booking for yourself, not both"
                if self.is_self
                else "Please select a child or book for yourself"
            )


# =============================================================================
# Availability Slots
# =============================================================================

def create_slot(
    db: Session,
    doctor_id: UUID,
    available_date: date,
    start_time: time,
    end_time: time,
    today: date,
) -> DoctorAvailability:
    """Publish a slot. Start must precede end; date must not be in the past."""
    if start_time >= end_time:
        raise InvalidSlotError("End time must be after start time")
    if available_date < today:
        raise InvalidSlotError("Cannot add availability in the past")

    slot = DoctorAvailability(
        doctor_id=doctor_id,
        available_date=available_date,
        start_time=start_time,
        end_time=end_time,
        is_booked=False,
    )
    db.add(slot)
    db.flush()
    logger.info(
        "Availability slot created",
        extra=build_log_context(doctor_id=str(doctor_id), slot_id=str(slot.id)),
    )
    return slot


def delete_slot(db: Session, doctor_id: UUID, slot_id: UUID) -> None:
    """Remove an unbooked slot owned by the doctor."""
    slot = db.scalars(
        select(DoctorAvailability).where(
            DoctorAvailability.id == slot_id,
            DoctorAvailability.doctor_id == doctor_id,
        )
    ).first()
    if not slot:
        raise SlotNotFoundError(f"Slot {slot_id} not found")
    if slot.is_booked:
        raise SlotAlreadyBookedError("Booked slots cannot be removed")
    db.delete(slot)
    db.flush()


def list_slots(db: Session, doctor_id: UUID) -> list[DoctorAvailability]:
    """All slots of a doctor, booked or not, by date then start time."""
    return list(
        db.scalars(
            select(DoctorAvailability)
            .where(DoctorAvailability.doctor_id == doctor_id)
            .order_by(DoctorAvailability.available_date, DoctorAvailability.start_time)
        ).all()
    )


def fetch_open_slots(db: Session, doctor_id: UUID, from_date: date) -> list[DoctorAvailability]:
    """Unbooked slots on or after from_date, by date then start time."""
    return list(
        db.scalars(
            select(DoctorAvailability)
            .where(
                DoctorAvailability.doctor_id == doctor_id,
                DoctorAvailability.is_booked.is_(False),
                DoctorAvailability.available_date >= from_date,
            )
            .order_by(DoctorAvailability.available_date, DoctorAvailability.start_time)
        ).all()
    )


# =============================================================================
# Booking
# =============================================================================

def _claim_slot(db: Session, doctor_id: UUID, slot_id: UUID) -> bool:
    """Atomically flip is_booked false -> true. True if this caller won."""
    result = db.execute(
        update(DoctorAvailability)
        .where(
            DoctorAvailability.id == slot_id,
            DoctorAvailability.doctor_id == doctor_id,
            DoctorAvailability.is_booked.is_(False),
        )
        .values(is_booked=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def book_appointment(
    db: Session,
    doctor_id: UUID,
    requester_id: UUID,
    slot_id: UUID,
    beneficiary: Beneficiary,
    notes: str | None = None,
) -> Appointment:
    """
    Book a slot for the requester or one of their children.

    The slot is claimed first with a conditional update (is_booked false ->
    true); only the caller whose update matched a row goes on to insert the
    appointment, in the same transaction. Any failure after the claim rolls
    the whole transaction back, so the slot is never left booked without an
    appointment, nor an appointment left on an open slot.

    Commits on success.

    Raises:
        InvalidBeneficiaryError: beneficiary malformed or child not owned
        SlotNotFoundError: slot missing or not this doctor's
        SlotAlreadyBookedError: another booking won the slot
    """
    beneficiary.validate()
    if beneficiary.child_id is not None:
        owned = db.scalars(
            select(Child.id).where(
                Child.id == beneficiary.child_id,
                Child.parent_id == requester_id,
            )
        ).first()
        if not owned:
            raise InvalidBeneficiaryError("Selected child not found")

    slot = db.scalars(
        select(DoctorAvailability).where(
            DoctorAvailability.id == slot_id,
            DoctorAvailability.doctor_id == doctor_id,
        )
    ).first()
    if not slot:
        raise SlotNotFoundError(f"Slot {slot_id} not found")

    log_context = build_log_context(
        user_id=str(requester_id), doctor_id=str(doctor_id), slot_id=str(slot_id)
    )

    if not _claim_slot(db, doctor_id, slot_id):
        db.rollback()
        logger.info("Booking rejected: slot already taken", extra=log_context)
        raise SlotAlreadyBookedError("This slot has already been booked")

    appointment = Appointment(
        doctor_id=doctor_id,
        parent_id=requester_id,
        child_id=beneficiary.child_id,
        availability_id=slot.id,
        appointment_date=slot.available_date,
        appointment_time=slot.start_time,
        status=AppointmentStatus.PENDING.value,
        is_self_booking=beneficiary.is_self,
        notes=notes,
    )
    try:
        db.add(appointment)
        db.flush()
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Booking rolled back after slot claim", extra=log_context)
        raise SlotAlreadyBookedError("This slot has already been booked")
    except Exception:
        db.rollback()
        raise

    db.refresh(appointment)
    logger.info(
        "Appointment booked",
        extra=build_log_context(
            user_id=str(requester_id),
            doctor_id=str(doctor_id),
            slot_id=str(slot_id),
            appointment_id=str(appointment.id),
        ),
    )
    return appointment


# =============================================================================
# Appointments
# =============================================================================

def list_appointments_for_parent(db: Session, parent_id: UUID) -> list[Appointment]:
    return list(
        db.scalars(
            select(Appointment)
            .where(Appointment.parent_id == parent_id)
            .order_by(Appointment.appointment_date, Appointment.appointment_time)
        ).all()
    )


def list_appointments_for_doctor(
    db: Session,
    doctor_id: UUID,
    status: AppointmentStatus | None = None,
) -> list[Appointment]:
    query = select(Appointment).where(Appointment.doctor_id == doctor_id)
    if status:
        query = query.where(Appointment.status == status.value)
    return list(
        db.scalars(
            query.order_by(Appointment.appointment_date, Appointment.appointment_time)
        ).all()
    )


def get_appointment(
    db: Session,
    appointment_id: UUID,
    user_id: UUID,
    doctor_id: UUID | None = None,
) -> Appointment | None:
    """Get an appointment visible to the caller (requester or the doctor)."""
    visibility = [Appointment.parent_id == user_id]
    if doctor_id:
        visibility.append(Appointment.doctor_id == doctor_id)
    return db.scalars(
        select(Appointment).where(Appointment.id == appointment_id, or_(*visibility))
    ).first()


def update_status(
    db: Session,
    appointment: Appointment,
    new_status: AppointmentStatus,
) -> Appointment:
    """
    Move an appointment along its lifecycle.

    Cancelling does not reopen the slot.
    """
    current = AppointmentStatus(appointment.status)
    allowed = APPOINTMENT_TRANSITIONS.get(current, frozenset())
    if new_status not in allowed:
        raise InvalidStatusTransitionError(
            f"Cannot change appointment from {current.value} to {new_status.value}"
        )
    appointment.status = new_status.value
    db.flush()
    return appointment
