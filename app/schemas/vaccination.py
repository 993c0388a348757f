"""Vaccination schemas - Pydantic models for the schedule API."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel

from app.db.enums import VaccinationStatus


class CatalogEntryRead(BaseModel):
    """One entry of the vaccine catalog."""
    id: UUID
    vaccine_name: str
    vaccine_code: str
    purpose: str
    age_weeks: int | None
    age_months: int | None
    age_years: int | None
    is_optional: bool
    sort_order: int
    age_label: str


class VaccinationRecordRead(BaseModel):
    """A child's record with its derived status."""
    id: UUID
    schedule_id: UUID
    vaccine_name: str
    vaccine_code: str
    purpose: str
    is_optional: bool
    age_label: str
    is_completed: bool
    administered_date: date | None
    notes: str | None
    status: VaccinationStatus
    is_due: bool


class ScheduleGroupRead(BaseModel):
    """Records sharing one age label."""
    age_label: str
    records: list[VaccinationRecordRead]


class ScheduleSummaryRead(BaseModel):
    total: int
    completed: int
    due: int
    upcoming: int


class ChildScheduleRead(BaseModel):
    """Schedule view for one child on one evaluation date."""
    child_id: UUID
    evaluated_on: date
    summary: ScheduleSummaryRead
    records: list[VaccinationRecordRead]
    groups: list[ScheduleGroupRead]


class ToggleCompletionRequest(BaseModel):
    """
    Completion flag as the client last saw it.

    The record is set to the opposite of this value.
    """
    current_completion_flag: bool
