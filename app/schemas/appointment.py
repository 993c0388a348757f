"""Appointment schemas - Pydantic models for availability and booking."""

from datetime import date, datetime, time
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.db.enums import AppointmentStatus


# =============================================================================
# Availability Slots
# =============================================================================

class SlotCreate(BaseModel):
    """Schema for publishing an availability slot."""
    available_date: date
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_time_range(self) -> "SlotCreate":
        if self.start_time >= self.end_time:
            raise ValueError("End time must be after start time")
        return self


class SlotRead(BaseModel):
    """Schema for reading a slot."""
    id: UUID
    doctor_id: UUID
    available_date: date
    start_time: time
    end_time: time
    is_booked: bool

    model_config = {"from_attributes": True}


# =============================================================================
# Appointments
# =============================================================================

class BookingCreate(BaseModel):
    """
    Schema for booking a slot.

    Exactly one of child_id or is_self_booking must identify who the
    appointment is for.
    """
    slot_id: UUID
    child_id: UUID | None = None
    is_self_booking: bool = False
    notes: str | None = Field(None, max_length=2000)


class AppointmentRead(BaseModel):
    """Schema for reading an appointment."""
    id: UUID
    doctor_id: UUID
    parent_id: UUID
    child_id: UUID | None
    availability_id: UUID
    appointment_date: date
    appointment_time: time
    status: str
    is_self_booking: bool
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus
