"""create availability tables

Revision ID: 4b1d9a7c2e10
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4b1d9a7c2e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Business owners
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('business_name', sa.String(200), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=True, server_default='UTC'),
        sa.Column('closed_months', sa.JSON, nullable=True),
        sa.Column('booking_window_days', sa.Integer, nullable=True),
        sa.Column('booking_window_start', sa.Date, nullable=True),
        sa.Column('booking_window_end', sa.Date, nullable=True),
        sa.Column('booking_window_date', sa.Date, nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=True, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True)
    )
    op.create_index('ix_users_email', 'users', ['email'])

    # 2. Appointment types
    op.create_table(
        'appointment_types',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('duration', sa.Integer, nullable=False),
        sa.Column('buffer_time_before', sa.Integer, nullable=True, server_default='0'),
        sa.Column('buffer_time_after', sa.Integer, nullable=True, server_default='0'),
        sa.Column('price', sa.Integer, nullable=True, server_default='0'),
        sa.Column('color', sa.String(7), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=True, server_default=sa.text('true')),
        sa.Column('sort_order', sa.Integer, nullable=True, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True)
    )
    op.create_index('ix_appointment_types_user_id', 'appointment_types', ['user_id'])
    op.create_index('ix_appointment_types_is_active', 'appointment_types', ['is_active'])

    # 3. Weekly hours
    op.create_table(
        'weekly_availability',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('weekday', sa.String(10), nullable=False),
        sa.Column('start_time', sa.Time, nullable=False),
        sa.Column('end_time', sa.Time, nullable=False),
        sa.Column('is_available', sa.Boolean, nullable=True, server_default=sa.text('true'))
    )
    op.create_index('ix_weekly_availability_user_id', 'weekly_availability', ['user_id'])

    # 4. Date exceptions
    op.create_table(
        'availability_exceptions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('appointment_type_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('appointment_types.id', ondelete='CASCADE'), nullable=True),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('start_time', sa.Time, nullable=True),
        sa.Column('end_time', sa.Time, nullable=True),
        sa.Column('reason', sa.String, nullable=True),
        sa.Column('custom_schedule', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True)
    )
    op.create_index('idx_availability_exceptions_user_date', 'availability_exceptions', ['user_id', 'date'])

    # 5. Blocked date ranges
    op.create_table(
        'blocked_dates',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=False),
        sa.Column('reason', sa.String, nullable=True),
        sa.Column('is_all_day', sa.Boolean, nullable=True, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True)
    )
    op.create_index('ix_blocked_dates_user_id', 'blocked_dates', ['user_id'])

    # 6. Bookings
    op.create_table(
        'bookings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('appointment_type_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('appointment_types.id'), nullable=True),
        sa.Column('customer_name', sa.String, nullable=False),
        sa.Column('customer_email', sa.String, nullable=False),
        sa.Column('appointment_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration', sa.Integer, nullable=True, server_default='30'),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('status', sa.String, nullable=True, server_default='confirmed'),
        sa.Column('booking_token', sa.String(64), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True)
    )
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])
    op.create_index('ix_bookings_appointment_date', 'bookings', ['appointment_date'])
    op.create_index('idx_bookings_user_status_date', 'bookings', ['user_id', 'status', 'appointment_date'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('bookings')
    op.drop_table('blocked_dates')
    op.drop_table('availability_exceptions')
    op.drop_table('weekly_availability')
    op.drop_table('appointment_types')
    op.drop_table('users')
