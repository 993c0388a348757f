"""Medication schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field


class MedicationCreate(BaseModel):
    """Schema for recording a prescription."""
    health_issue: str = Field(..., min_length=1, max_length=255)
    medicine_name: str = Field(..., min_length=1, max_length=255)
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = Field(..., min_length=1, max_length=100)
    duration: str = Field(..., min_length=1, max_length=100)
    doctor_name: str = Field(..., min_length=1, max_length=255)
    doctor_contact: str | None = Field(None, max_length=100)
    prescribed_date: date
    notes: str | None = None


class MedicationRead(BaseModel):
    id: UUID
    child_id: UUID
    health_issue: str
    medicine_name: str
    dosage: str
    frequency: str
    duration: str
    doctor_name: str
    doctor_contact: str | None
    prescribed_date: date
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
