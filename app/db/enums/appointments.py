"""Appointment and doctor enums."""

from enum import Enum


class AppointmentStatus(str, Enum):
    """
    Appointment lifecycle status.

    Flow: pending → confirmed → completed
              ↘ cancelled    ↘ cancelled
                             ↘ no_show
    """

    PENDING = "pending"  # Awaiting doctor confirmation
    CONFIRMED = "confirmed"  # Accepted by doctor
    COMPLETED = "completed"  # Consultation took place
    CANCELLED = "cancelled"  # Cancelled by doctor
    NO_SHOW = "no_show"  # Patient didn't show up


class DoctorStatus(str, Enum):
    """Doctor profile review status."""

    PENDING = "pending"  # Awaiting admin review
    ACTIVE = "active"  # Listed in search
    REJECTED = "rejected"
    SUSPENDED = "suspended"


# Allowed appointment status transitions (from -> to)
APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset(
        {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
        }
    ),
}


# Default statuses
DEFAULT_APPOINTMENT_STATUS = AppointmentStatus.PENDING
DEFAULT_DOCTOR_STATUS = DoctorStatus.PENDING
