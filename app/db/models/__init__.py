"""SQLAlchemy ORM models."""

from app.db.models.auth import User
from app.db.models.children import Child, Medication
from app.db.models.doctors import Appointment, Doctor, DoctorAvailability
from app.db.models.vaccinations import VaccinationRecord, VaccineScheduleEntry

__all__ = [
    "Appointment",
    "Child",
    "Doctor",
    "DoctorAvailability",
    "Medication",
    "User",
    "VaccinationRecord",
    "VaccineScheduleEntry",
]
