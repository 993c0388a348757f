"""Vaccination service - schedule status engine and record updates.

Handles:
- Age labels and due-now evaluation per catalog entry
- Completed / due / upcoming counts and grouping in catalog order
- Catalog seeding and per-child record fan-out
- Completion toggle (write first, then re-fetch)

All evaluation functions take "today" explicitly; nothing here reads a clock.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, NamedTuple, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import VaccinationStatus, VaccinationView
from app.db.models import Child, VaccinationRecord, VaccineScheduleEntry
from app.db.vaccine_catalog import catalog_rows

logger = logging.getLogger(__name__)

AT_BIRTH_LABEL = "At birth"

# Fixed-length approximations; due dates downstream are calibrated against these
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365


class VaccinationServiceError(Exception):
    """Base exception for vaccination service errors."""

    pass


class VaccinationRecordNotFoundError(VaccinationServiceError):
    """Record does not exist or is not visible to the caller."""

    pass


class InvalidCatalogEntryError(VaccinationServiceError):
    """Catalog entry sets more than one age offset."""

    pass


# =============================================================================
# Types
# =============================================================================

class ScheduleSummary(NamedTuple):
    """Aggregate counts over a child's records."""
    total: int
    completed: int
    due: int
    upcoming: int


@dataclass
class ScheduleItem:
    """One record with its derived presentation fields."""
    record: VaccinationRecord
    age_label: str
    status: VaccinationStatus

    @property
    def is_due(self) -> bool:
        return self.status == VaccinationStatus.DUE


@dataclass
class ChildSchedule:
    """Computed schedule view for one child on one evaluation date."""
    child_id: UUID
    evaluated_on: date
    summary: ScheduleSummary
    items: list[ScheduleItem] = field(default_factory=list)
    groups: list[tuple[str, list[ScheduleItem]]] = field(default_factory=list)


# =============================================================================
# Pure evaluation
# =============================================================================

def validate_catalog_entry(entry: VaccineScheduleEntry) -> None:
    """Raise if more than one age offset is set."""
    offsets = [entry.age_weeks, entry.age_months, entry.age_years]
    if sum(value is not None for value in offsets) > 1:
        raise InvalidCatalogEntryError(
            f"Catalog entry {entry.vaccine_code} sets more than one age offset"
        )


def get_age_label(entry: VaccineScheduleEntry) -> str:
    """Human label for the scheduled age of a catalog entry."""
    if entry.age_weeks:
        return f"{entry.age_weeks} weeks"
    if entry.age_months:
        return f"{entry.age_months} months"
    if entry.age_years:
        return f"{entry.age_years} years"
    return AT_BIRTH_LABEL


def age_in_days(date_of_birth: date, today: date) -> int:
    return (today - date_of_birth).days


def is_due(record: VaccinationRecord, date_of_birth: date, today: date) -> bool:
    """
    Whether an uncompleted vaccine has reached its scheduled age.

    At-birth entries stay due until completed, whatever the child's age.
    """
    if record.is_completed:
        return False

    days = age_in_days(date_of_birth, today)
    entry = record.schedule
    if entry.age_weeks:
        return days >= entry.age_weeks * DAYS_PER_WEEK
    if entry.age_months:
        return days >= entry.age_months * DAYS_PER_MONTH
    if entry.age_years:
        return days >= entry.age_years * DAYS_PER_YEAR
    return True


def get_status(record: VaccinationRecord, date_of_birth: date, today: date) -> VaccinationStatus:
    if record.is_completed:
        return VaccinationStatus.COMPLETED
    if is_due(record, date_of_birth, today):
        return VaccinationStatus.DUE
    return VaccinationStatus.UPCOMING


def summarize(
    records: Sequence[VaccinationRecord],
    date_of_birth: date,
    today: date,
) -> ScheduleSummary:
    """Completed, due and upcoming counts; the three always sum to total."""
    total = len(records)
    completed = sum(1 for r in records if r.is_completed)
    due = sum(1 for r in records if is_due(r, date_of_birth, today))
    return ScheduleSummary(
        total=total,
        completed=completed,
        due=due,
        upcoming=total - completed - due,
    )


def _catalog_order(records: Iterable[VaccinationRecord]) -> list[VaccinationRecord]:
    return sorted(records, key=lambda r: r.schedule.sort_order)


def group_by_age(records: Iterable[VaccinationRecord]) -> dict[str, list[VaccinationRecord]]:
    """
    Bucket records by age label.

    Bucket order follows catalog sort order, regardless of the order in
    which records are passed in.
    """
    groups: dict[str, list[VaccinationRecord]] = {}
    for record in _catalog_order(records):
        groups.setdefault(get_age_label(record.schedule), []).append(record)
    return groups


def filter_records(
    records: Iterable[VaccinationRecord],
    view: VaccinationView,
    date_of_birth: date,
    today: date,
) -> list[VaccinationRecord]:
    """Apply an all / due / completed view, keeping catalog order."""
    ordered = _catalog_order(records)
    if view == VaccinationView.DUE:
        return [r for r in ordered if is_due(r, date_of_birth, today)]
    if view == VaccinationView.COMPLETED:
        return [r for r in ordered if r.is_completed]
    return ordered


def build_schedule(
    child_id: UUID,
    records: Sequence[VaccinationRecord],
    date_of_birth: date,
    today: date,
    view: VaccinationView = VaccinationView.ALL,
) -> ChildSchedule:
    """
    Compute the full schedule view for a child.

    Summary counts always cover every record; items and groups reflect
    the requested view.
    """
    def to_item(record: VaccinationRecord) -> ScheduleItem:
        return ScheduleItem(
            record=record,
            age_label=get_age_label(record.schedule),
            status=get_status(record, date_of_birth, today),
        )

    visible = filter_records(records, view, date_of_birth, today)
    items = [to_item(r) for r in visible]
    groups = [
        (label, [to_item(r) for r in bucket])
        for label, bucket in group_by_age(visible).items()
    ]
    return ChildSchedule(
        child_id=child_id,
        evaluated_on=today,
        summary=summarize(records, date_of_birth, today),
        items=items,
        groups=groups,
    )


# =============================================================================
# Catalog
# =============================================================================

def seed_catalog(db: Session) -> int:
    """Insert missing catalog entries (idempotent on vaccine_code). Returns count added."""
    existing = set(db.scalars(select(VaccineScheduleEntry.vaccine_code)).all())
    added = 0
    for row in catalog_rows():
        if row["vaccine_code"] in existing:
            continue
        entry = VaccineScheduleEntry(**row)
        validate_catalog_entry(entry)
        db.add(entry)
        added += 1
    db.flush()
    return added


def list_catalog(db: Session) -> list[VaccineScheduleEntry]:
    return list(
        db.scalars(
            select(VaccineScheduleEntry).order_by(VaccineScheduleEntry.sort_order)
        ).all()
    )


# =============================================================================
# Records
# =============================================================================

def create_records_for_child(db: Session, child: Child) -> list[VaccinationRecord]:
    """
    Fan out one uncompleted record per catalog entry.

    Runs inside the caller's transaction; does not commit.
    """
    records = [
        VaccinationRecord(child_id=child.id, schedule_id=entry.id, is_completed=False)
        for entry in list_catalog(db)
    ]
    db.add_all(records)
    db.flush()
    return records


def fetch_records(db: Session, child_id: UUID) -> list[VaccinationRecord]:
    """Records for a child joined to their catalog entries, in catalog order."""
    return list(
        db.scalars(
            select(VaccinationRecord)
            .join(VaccineScheduleEntry, VaccinationRecord.schedule_id == VaccineScheduleEntry.id)
            .where(VaccinationRecord.child_id == child_id)
            .order_by(VaccineScheduleEntry.sort_order)
            .execution_options(populate_existing=True)
        )
        .unique()
        .all()
    )


def toggle_completion(
    db: Session,
    record_id: UUID,
    current_completion_flag: bool,
    today: date,
    parent_id: UUID,
) -> VaccinationRecord:
    """
    Set the completion flag to the negation of current_completion_flag.

    Completing stamps administered_date with today; un-completing clears it.
    The write is committed before any in-memory state is refreshed; on
    failure the transaction is rolled back and nothing the caller holds
    has changed.

    Raises:
        VaccinationRecordNotFoundError: record missing or not owned by parent
    """
    new_flag = not current_completion_flag
    owned_children = select(Child.id).where(Child.parent_id == parent_id)

    try:
        result = db.execute(
            update(VaccinationRecord)
            .where(
                VaccinationRecord.id == record_id,
                VaccinationRecord.child_id.in_(owned_children),
            )
            .values(
                is_completed=new_flag,
                administered_date=today if new_flag else None,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise VaccinationRecordNotFoundError(f"Vaccination record {record_id} not found")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Vaccination record %s",
        "completed" if new_flag else "reopened",
        extra=build_log_context(user_id=str(parent_id), record_id=str(record_id)),
    )

    record = db.get(VaccinationRecord, record_id, populate_existing=True)
    return record
