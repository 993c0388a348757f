"""Pydantic schemas for API request/response models."""

from app.schemas.appointment import (
    AppointmentRead,
    AppointmentStatusUpdate,
    BookingCreate,
    SlotCreate,
    SlotRead,
)
from app.schemas.auth import TokenPayload, UserSession
from app.schemas.child import ChildCreate, ChildRead, HealthIssueOptions
from app.schemas.doctor import DoctorProfileCreate, DoctorRead, DoctorReject
from app.schemas.health import HealthRecommendationRequest, HealthRecommendationResponse
from app.schemas.medication import MedicationCreate, MedicationRead
from app.schemas.vaccination import (
    CatalogEntryRead,
    ChildScheduleRead,
    ScheduleGroupRead,
    ScheduleSummaryRead,
    ToggleCompletionRequest,
    VaccinationRecordRead,
)

__all__ = [
    "AppointmentRead",
    "AppointmentStatusUpdate",
    "BookingCreate",
    "SlotCreate",
    "SlotRead",
    "TokenPayload",
    "UserSession",
    "ChildCreate",
    "ChildRead",
    "HealthIssueOptions",
    "DoctorProfileCreate",
    "DoctorRead",
    "DoctorReject",
    "HealthRecommendationRequest",
    "HealthRecommendationResponse",
    "MedicationCreate",
    "MedicationRead",
    "CatalogEntryRead",
    "ChildScheduleRead",
    "ScheduleGroupRead",
    "ScheduleSummaryRead",
    "ToggleCompletionRequest",
    "VaccinationRecordRead",
]
