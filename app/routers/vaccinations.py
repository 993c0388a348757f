"""Vaccinations router - catalog, per-child schedule and completion toggle."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from app.db.enums import Role, VaccinationView
from app.schemas.auth import UserSession
from app.schemas.vaccination import (
    CatalogEntryRead,
    ChildScheduleRead,
    ScheduleGroupRead,
    ScheduleSummaryRead,
    ToggleCompletionRequest,
    VaccinationRecordRead,
)
from app.services import child_service, vaccination_service
from app.services.vaccination_service import ChildSchedule, ScheduleItem
from app.utils.dates import today_in_timezone

router = APIRouter()

require_parent = require_roles([Role.PARENT])


# =============================================================================
# Helper Functions
# =============================================================================

def _item_to_read(item: ScheduleItem) -> VaccinationRecordRead:
    record = item.record
    entry = record.schedule
    return VaccinationRecordRead(
        id=record.id,
        schedule_id=entry.id,
        vaccine_name=entry.vaccine_name,
        vaccine_code=entry.vaccine_code,
        purpose=entry.purpose,
        is_optional=entry.is_optional,
        age_label=item.age_label,
        is_completed=record.is_completed,
        administered_date=record.administered_date,
        notes=record.notes,
        status=item.status,
        is_due=item.is_due,
    )


def _schedule_to_read(schedule: ChildSchedule) -> ChildScheduleRead:
    return ChildScheduleRead(
        child_id=schedule.child_id,
        evaluated_on=schedule.evaluated_on,
        summary=ScheduleSummaryRead(**schedule.summary._asdict()),
        records=[_item_to_read(i) for i in schedule.items],
        groups=[
            ScheduleGroupRead(age_label=label, records=[_item_to_read(i) for i in items])
            for label, items in schedule.groups
        ],
    )


def _load_schedule(db: Session, child, today, view: VaccinationView) -> ChildScheduleRead:
    records = vaccination_service.fetch_records(db, child.id)
    schedule = vaccination_service.build_schedule(
        child.id, records, child.date_of_birth, today, view
    )
    return _schedule_to_read(schedule)


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/vaccinations/catalog", response_model=list[CatalogEntryRead])
def list_catalog(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """The national vaccine catalog in schedule order."""
    return [
        CatalogEntryRead(
            id=entry.id,
            vaccine_name=entry.vaccine_name,
            vaccine_code=entry.vaccine_code,
            purpose=entry.purpose,
            age_weeks=entry.age_weeks,
            age_months=entry.age_months,
            age_years=entry.age_years,
            is_optional=entry.is_optional,
            sort_order=entry.sort_order,
            age_label=vaccination_service.get_age_label(entry),
        )
        for entry in vaccination_service.list_catalog(db)
    ]


@router.get("/children/{child_id}/vaccinations", response_model=ChildScheduleRead)
def get_schedule(
    child_id: UUID,
    view: VaccinationView = Query(VaccinationView.ALL),
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    """
    Vaccination schedule for a child.

    Counts cover every record; records and groups follow the requested view.
    """
    child = child_service.get_child(db, session.user_id, child_id)
    if not child:
        raise HTTPException(status_code=404, detail="Child not found")
    return _load_schedule(db, child, today_in_timezone(tz), view)


@router.post(
    "/vaccinations/{record_id}/toggle",
    response_model=ChildScheduleRead,
    dependencies=[Depends(require_csrf_header)],
)
def toggle_completion(
    record_id: UUID,
    data: ToggleCompletionRequest,
    view: VaccinationView = Query(VaccinationView.ALL),
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    """Flip a record's completion and return the recomputed schedule."""
    today = today_in_timezone(tz)
    try:
        record = vaccination_service.toggle_completion(
            db=db,
            record_id=record_id,
            current_completion_flag=data.current_completion_flag,
            today=today,
            parent_id=session.user_id,
        )
    except vaccination_service.VaccinationRecordNotFoundError:
        raise HTTPException(status_code=404, detail="Vaccination record not found")

    child = child_service.require_child(db, session.user_id, record.child_id)
    return _load_schedule(db, child, today, view)
