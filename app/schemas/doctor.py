"""Doctor schemas - Pydantic models for doctor profiles and discovery."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class DoctorProfileCreate(BaseModel):
    """Schema for submitting a doctor application."""
    specialization: str = Field(..., min_length=1, max_length=100)
    qualification: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    experience_years: int = Field(0, ge=0, le=80)
    consultation_fee: Decimal | None = Field(None, ge=0)
    bio: str | None = None


class DoctorRead(BaseModel):
    """Public doctor profile."""
    id: UUID
    user_id: UUID
    display_name: str
    specialization: str
    qualification: str
    experience_years: int
    location: str
    consultation_fee: Decimal | None
    bio: str | None
    status: str
    rejection_reason: str | None
    created_at: datetime


class DoctorReject(BaseModel):
    reason: str | None = Field(None, max_length=1000)
