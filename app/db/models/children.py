"""SQLAlchemy ORM models for children and their medications."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import date, datetime

from sqlalchemy import JSON, Date, ForeignKey, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.db.models import User, VaccinationRecord


class Child(Base):
    """
    A child registered by a parent account.

    Creating a child fans out one VaccinationRecord per catalog entry
    (see child_service.create_child).
    """

    __tablename__ = "children"
    __table_args__ = (Index("idx_children_parent", "parent_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    place_of_birth: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Free-form labels, drawn from SUGGESTED_HEALTH_ISSUES but not constrained to it
    birth_health_issues: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    parent: Mapped["User"] = relationship()
    vaccination_records: Mapped[list["VaccinationRecord"]] = relationship(
        back_populates="child", cascade="all, delete-orphan"
    )
    medications: Mapped[list["Medication"]] = relationship(
        back_populates="child", cascade="all, delete-orphan"
    )


class Medication(Base):
    """Prescribed medication for a child's health issue."""

    __tablename__ = "medications"
    __table_args__ = (Index("idx_medications_child", "child_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False
    )
    health_issue: Mapped[str] = mapped_column(String(255), nullable=False)
    medicine_name: Mapped[str] = mapped_column(String(255), nullable=False)
    dosage: Mapped[str] = mapped_column(String(100), nullable=False)
    frequency: Mapped[str] = mapped_column(String(100), nullable=False)
    duration: Mapped[str] = mapped_column(String(100), nullable=False)
    doctor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    doctor_contact: Mapped[str | None] = mapped_column(String(100), nullable=True)
    prescribed_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    child: Mapped["Child"] = relationship(back_populates="medications")
