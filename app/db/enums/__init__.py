"""Enum definitions for application constants."""

from app.db.enums.appointments import (
    APPOINTMENT_TRANSITIONS,
    AppointmentStatus,
    DEFAULT_APPOINTMENT_STATUS,
    DEFAULT_DOCTOR_STATUS,
    DoctorStatus,
)
from app.db.enums.auth import Role
from app.db.enums.children import Gender, VaccinationStatus, VaccinationView

__all__ = [
    "APPOINTMENT_TRANSITIONS",
    "AppointmentStatus",
    "DEFAULT_APPOINTMENT_STATUS",
    "DEFAULT_DOCTOR_STATUS",
    "DoctorStatus",
    "Gender",
    "Role",
    "VaccinationStatus",
    "VaccinationView",
]
