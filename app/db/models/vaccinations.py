"""SQLAlchemy ORM models for the vaccine catalog and per-child records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.db.models import Child


class VaccineScheduleEntry(Base):
    """
    One scheduled vaccine in the national catalog.

    At most one of age_weeks / age_months / age_years is set; none set
    means the dose is given at birth. Seeded once, read-only thereafter.
    """

    __tablename__ = "vaccination_schedule"
    __table_args__ = (
        UniqueConstraint("vaccine_code", name="uq_vaccination_schedule_code"),
        CheckConstraint(
            "(CASE WHEN age_weeks IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN age_months IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN age_years IS NULL THEN 0 ELSE 1 END) <= 1",
            name="ck_vaccination_schedule_single_age",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    vaccine_name: Mapped[str] = mapped_column(String(255), nullable=False)
    vaccine_code: Mapped[str] = mapped_column(String(50), nullable=False)
    purpose: Mapped[str] = mapped_column(Text, nullable=False)
    age_weeks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    age_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    age_years: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_optional: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)


class VaccinationRecord(Base):
    """
    Completion state of one catalog entry for one child.

    administered_date is set iff is_completed is true; the toggle in
    vaccination_service keeps the two in step.
    """

    __tablename__ = "vaccination_records"
    __table_args__ = (
        UniqueConstraint("child_id", "schedule_id", name="uq_vaccination_record_child_schedule"),
        Index("idx_vaccination_records_child", "child_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False
    )
    schedule_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("vaccination_schedule.id", ondelete="RESTRICT"), nullable=False
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    administered_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    verified_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    child: Mapped["Child"] = relationship(back_populates="vaccination_records")
    schedule: Mapped["VaccineScheduleEntry"] = relationship(lazy="joined")
