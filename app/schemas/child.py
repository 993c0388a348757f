"""Child schemas - Pydantic models for children API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import Gender


class ChildCreate(BaseModel):
    """Schema for registering a child."""
    name: str = Field(..., min_length=1, max_length=255)
    date_of_birth: date
    gender: Gender
    place_of_birth: str | None = Field(None, max_length=255)
    birth_health_issues: list[str] | None = None


class ChildRead(BaseModel):
    """Schema for reading a child."""
    id: UUID
    name: str
    date_of_birth: date
    gender: str
    place_of_birth: str | None
    birth_health_issues: list[str] | None
    age_description: str
    created_at: datetime


class HealthIssueOptions(BaseModel):
    """Suggested labels for birth health issues."""
    options: list[str]
