"""Health recommendation schemas."""

from uuid import UUID

from pydantic import BaseModel


class HealthRecommendationRequest(BaseModel):
    """
    Ask for guidance on birth health issues.

    With child_id, issues, name and age are taken from the stored child;
    otherwise all three must be supplied.
    """
    child_id: UUID | None = None
    health_issues: list[str] | None = None
    child_name: str | None = None
    age_label: str | None = None


class HealthRecommendationResponse(BaseModel):
    recommendations: str
