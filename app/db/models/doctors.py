"""SQLAlchemy ORM models for doctors, availability slots and appointments."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_APPOINTMENT_STATUS, DEFAULT_DOCTOR_STATUS

if TYPE_CHECKING:
    from app.db.models import Child, User


class Doctor(Base):
    """
    Doctor profile attached to a user account.

    Listed in search only once an admin has set status to active.
    """

    __tablename__ = "doctors"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_doctors_user"),
        Index("idx_doctors_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    specialization: Mapped[str] = mapped_column(String(100), nullable=False)
    qualification: Mapped[str] = mapped_column(String(255), nullable=False)
    experience_years: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    consultation_fee: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_DOCTOR_STATUS.value, nullable=False
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship(lazy="joined")


class DoctorAvailability(Base):
    """
    A single bookable time window published by a doctor.

    is_booked flips false -> true exactly once, through the conditional
    update in appointment_service.book_appointment.
    """

    __tablename__ = "doctor_availability"
    __table_args__ = (
        Index("idx_doctor_availability_doctor_date", "doctor_id", "available_date"),
        CheckConstraint("start_time < end_time", name="ck_availability_time_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    doctor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False
    )
    available_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    is_booked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)


class Appointment(Base):
    """
    Booked consultation.

    Exactly one of child_id / is_self_booking identifies the beneficiary.
    Date and time are copied from the slot at booking time.
    """

    __tablename__ = "appointments"
    __table_args__ = (
        # One appointment per slot: storage-level backstop for the booking CAS
        UniqueConstraint("availability_id", name="uq_appointments_availability"),
        CheckConstraint(
            "(child_id IS NULL) = is_self_booking",
            name="ck_appointments_single_beneficiary",
        ),
        Index("idx_appointments_parent", "parent_id"),
        Index("idx_appointments_doctor", "doctor_id", "appointment_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    doctor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    child_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=True
    )
    availability_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("doctor_availability.id", ondelete="RESTRICT"), nullable=False
    )
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    appointment_time: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_APPOINTMENT_STATUS.value, nullable=False
    )
    is_self_booking: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    doctor: Mapped["Doctor"] = relationship()
    child: Mapped["Child | None"] = relationship()
    slot: Mapped["DoctorAvailability"] = relationship()
