"""Children router - registration and lookup of a parent's children."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_csrf_header, require_roles
from app.db.enums import Role
from app.schemas.auth import UserSession
from app.schemas.child import ChildCreate, ChildRead, HealthIssueOptions
from app.services import child_service
from app.utils.dates import describe_age, today_in_timezone

router = APIRouter()

require_parent = require_roles([Role.PARENT])


def _child_to_read(child, today) -> ChildRead:
    """Convert Child model to read schema."""
    return ChildRead(
        id=child.id,
        name=child.name,
        date_of_birth=child.date_of_birth,
        gender=child.gender,
        place_of_birth=child.place_of_birth,
        birth_health_issues=child.birth_health_issues,
        age_description=describe_age(child.date_of_birth, today),
        created_at=child.created_at,
    )


@router.get("/health-issues", response_model=HealthIssueOptions)
def list_health_issue_options():
    """Suggested birth health issue labels."""
    return HealthIssueOptions(options=child_service.SUGGESTED_HEALTH_ISSUES)


@router.get("", response_model=list[ChildRead])
def list_children(
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    """List the caller's children, newest first."""
    today = today_in_timezone(tz)
    children = child_service.list_children(db, session.user_id)
    return [_child_to_read(c, today) for c in children]


@router.post(
    "",
    response_model=ChildRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_child(
    data: ChildCreate,
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    """Register a child; vaccination records are created alongside."""
    today = today_in_timezone(tz)
    try:
        child = child_service.create_child(
            db=db,
            parent_id=session.user_id,
            name=data.name,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
            today=today,
            place_of_birth=data.place_of_birth,
            birth_health_issues=data.birth_health_issues,
        )
        db.commit()
    except child_service.InvalidChildError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(child)
    return _child_to_read(child, today)


@router.get("/{child_id}", response_model=ChildRead)
def get_child(
    child_id: UUID,
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    child = child_service.get_child(db, session.user_id, child_id)
    if not child:
        raise HTTPException(status_code=404, detail="Child not found")
    return _child_to_read(child, today_in_timezone(tz))
