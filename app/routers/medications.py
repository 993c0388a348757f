"""Medications router - prescriptions and PDF export for a child."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_csrf_header, require_roles
from app.db.enums import Role
from app.schemas.auth import UserSession
from app.schemas.medication import MedicationCreate, MedicationRead
from app.services import child_service, medication_service, pdf_service
from app.utils.dates import today_in_timezone

router = APIRouter()

require_parent = require_roles([Role.PARENT])


def _require_child(db: Session, session: UserSession, child_id: UUID):
    try:
        return child_service.require_child(db, session.user_id, child_id)
    except child_service.ChildNotFoundError:
        raise HTTPException(status_code=404, detail="Child not found")


@router.get("/children/{child_id}/medications", response_model=list[MedicationRead])
def list_medications(
    child_id: UUID,
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    child = _require_child(db, session, child_id)
    return medication_service.list_medications(db, child.id)


@router.post(
    "/children/{child_id}/medications",
    response_model=MedicationRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_medication(
    child_id: UUID,
    data: MedicationCreate,
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    child = _require_child(db, session, child_id)
    try:
        medication = medication_service.add_medication(
            db=db,
            child=child,
            health_issue=data.health_issue,
            medicine_name=data.medicine_name,
            dosage=data.dosage,
            frequency=data.frequency,
            duration=data.duration,
            doctor_name=data.doctor_name,
            prescribed_date=data.prescribed_date,
            today=today_in_timezone(tz),
            doctor_contact=data.doctor_contact,
            notes=data.notes,
        )
        db.commit()
    except medication_service.InvalidMedicationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(medication)
    return medication


@router.get("/children/{child_id}/medications/pdf")
def export_prescriptions_pdf(
    child_id: UUID,
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    """Download the child's prescriptions as a PDF."""
    child = _require_child(db, session, child_id)
    medications = medication_service.list_medications(db, child.id)
    today = today_in_timezone(tz)
    pdf_bytes = pdf_service.create_prescription_pdf(child, medications, today)

    safe_name = "".join(c for c in child.name if c.isalnum() or c in "-_") or "child"
    filename = f"prescriptions_{safe_name}_{today.isoformat()}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
