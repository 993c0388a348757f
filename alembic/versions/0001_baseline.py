"""Baseline migration - users, children, vaccinations, doctors, appointments

Revision ID: 0001_baseline
Revises: 
Create Date: 2025-06-02

Creates every table and seeds the national vaccine catalog.
"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.db.vaccine_catalog import catalog_rows


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables and seed the vaccine catalog."""

    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='parent'),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('token_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    # ==========================================================================
    # Children and medications
    # ==========================================================================
    op.create_table(
        'children',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', sa.String(10), nullable=False),
        sa.Column('place_of_birth', sa.String(255), nullable=True),
        sa.Column('birth_health_issues', sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_children_parent', 'children', ['parent_id'])

    op.create_table(
        'medications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('child_id', sa.Uuid(), sa.ForeignKey('children.id', ondelete='CASCADE'), nullable=False),
        sa.Column('health_issue', sa.String(255), nullable=False),
        sa.Column('medicine_name', sa.String(255), nullable=False),
        sa.Column('dosage', sa.String(100), nullable=False),
        sa.Column('frequency', sa.String(100), nullable=False),
        sa.Column('duration', sa.String(100), nullable=False),
        sa.Column('doctor_name', sa.String(255), nullable=False),
        sa.Column('doctor_contact', sa.String(100), nullable=True),
        sa.Column('prescribed_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_medications_child', 'medications', ['child_id'])

    # ==========================================================================
    # Vaccine catalog and per-child records
    # ==========================================================================
    schedule = op.create_table(
        'vaccination_schedule',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('vaccine_name', sa.String(255), nullable=False),
        sa.Column('vaccine_code', sa.String(50), nullable=False),
        sa.Column('purpose', sa.Text(), nullable=False),
        sa.Column('age_weeks', sa.Integer(), nullable=True),
        sa.Column('age_months', sa.Integer(), nullable=True),
        sa.Column('age_years', sa.Integer(), nullable=True),
        sa.Column('is_optional', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.UniqueConstraint('vaccine_code', name='uq_vaccination_schedule_code'),
        sa.CheckConstraint(
            "(CASE WHEN age_weeks IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN age_months IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN age_years IS NULL THEN 0 ELSE 1 END) <= 1",
            name='ck_vaccination_schedule_single_age',
        ),
    )

    op.create_table(
        'vaccination_records',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('child_id', sa.Uuid(), sa.ForeignKey('children.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'schedule_id', sa.Uuid(),
            sa.ForeignKey('vaccination_schedule.id', ondelete='RESTRICT'), nullable=False,
        ),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('administered_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('verified_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('child_id', 'schedule_id', name='uq_vaccination_record_child_schedule'),
    )
    op.create_index('idx_vaccination_records_child', 'vaccination_records', ['child_id'])

    # ==========================================================================
    # Doctors, availability and appointments
    # ==========================================================================
    op.create_table(
        'doctors',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('specialization', sa.String(100), nullable=False),
        sa.Column('qualification', sa.String(255), nullable=False),
        sa.Column('experience_years', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('consultation_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', name='uq_doctors_user'),
    )
    op.create_index('idx_doctors_status', 'doctors', ['status'])

    op.create_table(
        'doctor_availability',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('doctor_id', sa.Uuid(), sa.ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('available_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('is_booked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('start_time < end_time', name='ck_availability_time_range'),
    )
    op.create_index(
        'idx_doctor_availability_doctor_date', 'doctor_availability', ['doctor_id', 'available_date']
    )

    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('doctor_id', sa.Uuid(), sa.ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('child_id', sa.Uuid(), sa.ForeignKey('children.id', ondelete='CASCADE'), nullable=True),
        sa.Column(
            'availability_id', sa.Uuid(),
            sa.ForeignKey('doctor_availability.id', ondelete='RESTRICT'), nullable=False,
        ),
        sa.Column('appointment_date', sa.Date(), nullable=False),
        sa.Column('appointment_time', sa.Time(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('is_self_booking', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('availability_id', name='uq_appointments_availability'),
        sa.CheckConstraint(
            '(child_id IS NULL) = is_self_booking',
            name='ck_appointments_single_beneficiary',
        ),
    )
    op.create_index('idx_appointments_parent', 'appointments', ['parent_id'])
    op.create_index('idx_appointments_doctor', 'appointments', ['doctor_id', 'appointment_date'])

    # ==========================================================================
    # Seed catalog
    # ==========================================================================
    op.bulk_insert(schedule, [{"id": uuid.uuid4(), **row} for row in catalog_rows()])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('appointments')
    op.drop_table('doctor_availability')
    op.drop_table('doctors')
    op.drop_table('vaccination_records')
    op.drop_table('vaccination_schedule')
    op.drop_table('medications')
    op.drop_table('children')
    op.drop_table('users')
