"""Child service - registration and lookup scoped to the owning parent."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import Gender
from app.db.models import Child
from app.services import vaccination_service

logger = logging.getLogger(__name__)

SUGGESTED_HEALTH_ISSUES = [
    "Low birth weight",
    "Premature birth",
    "Jaundice",
    "Respiratory issues",
    "Heart conditions",
    "Infections at birth",
    "Other complications",
    "None",
]

# Selecting "None" in the suggestion list means no issues were recorded
_NO_ISSUES_LABEL = "none"


class ChildServiceError(Exception):
    """Base exception for child service errors."""

    pass


class ChildNotFoundError(ChildServiceError):
    """Child does not exist or belongs to another parent."""

    pass


class InvalidChildError(ChildServiceError):
    """Child data failed validation."""

    pass


def normalize_health_issues(labels: list[str] | None) -> list[str] | None:
    """Trim, drop blanks and the "None" sentinel, de-duplicate in order."""
    if not labels:
        return None
    seen: set[str] = set()
    cleaned: list[str] = []
    for label in labels:
        value = (label or "").strip()
        if not value or value.lower() == _NO_ISSUES_LABEL:
            continue
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(value)
    return cleaned or None


def create_child(
    db: Session,
    parent_id: UUID,
    name: str,
    date_of_birth: date,
    gender: Gender,
    today: date,
    place_of_birth: str | None = None,
    birth_health_issues: list[str] | None = None,
) -> Child:
    """
    Register a child and create their vaccination records.

    The child row and one record per catalog entry are flushed in the same
    transaction; the caller commits.
    """
    name = name.strip()
    if not name:
        raise InvalidChildError("Name is required")
    if date_of_birth > today:
        raise InvalidChildError("Date of birth cannot be in the future")

    child = Child(
        parent_id=parent_id,
        name=name,
        date_of_birth=date_of_birth,
        gender=Gender(gender).value,
        place_of_birth=(place_of_birth or "").strip() or None,
        birth_health_issues=normalize_health_issues(birth_health_issues),
    )
    db.add(child)
    db.flush()

    records = vaccination_service.create_records_for_child(db, child)
    logger.info(
        "Child registered with %d vaccination records",
        len(records),
        extra=build_log_context(user_id=str(parent_id), child_id=str(child.id)),
    )
    return child


def list_children(db: Session, parent_id: UUID) -> list[Child]:
    """List a parent's children, newest first."""
    return list(
        db.scalars(
            select(Child)
            .where(Child.parent_id == parent_id)
            .order_by(Child.created_at.desc(), Child.name)
        ).all()
    )


def get_child(db: Session, parent_id: UUID, child_id: UUID) -> Child | None:
    """Get a child owned by the parent."""
    return db.scalars(
        select(Child).where(Child.id == child_id, Child.parent_id == parent_id)
    ).first()


def require_child(db: Session, parent_id: UUID, child_id: UUID) -> Child:
    """Get a child owned by the parent or raise ChildNotFoundError."""
    child = get_child(db, parent_id, child_id)
    if not child:
        raise ChildNotFoundError(f"Child {child_id} not found")
    return child
