"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # Create films table
    op.create_table(
        'films',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('rating', sa.String(length=20), nullable=True),
        sa.Column('synopsis', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.CheckConstraint('duration_minutes > 0', name='ck_films_duration_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_films_title'), 'films', ['title'], unique=False)

    # Create rooms table
    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('room_type', sa.String(length=20), nullable=False, server_default='standard'),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('rows', sa.Integer(), nullable=False),
        sa.Column('seats_per_row', sa.Integer(), nullable=False),
        sa.Column('surcharge', sa.Numeric(precision=8, scale=2), nullable=False, server_default='0'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('equipment', JSONB(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('capacity = rows * seats_per_row', name='ck_rooms_capacity_layout'),
        sa.CheckConstraint('capacity > 0', name='ck_rooms_capacity_positive'),
        sa.CheckConstraint('surcharge >= 0', name='ck_rooms_surcharge_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('number')
    )

    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    # Create screenings table
    op.create_table(
        'screenings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('film_id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('base_price', sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column('seats_available', sa.Integer(), nullable=False),
        sa.Column('seats_reserved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.CheckConstraint('ends_at > starts_at', name='ck_screenings_time_order'),
        sa.CheckConstraint('seats_available >= 0', name='ck_screenings_available_non_negative'),
        sa.CheckConstraint('seats_reserved >= 0', name='ck_screenings_reserved_non_negative'),
        sa.CheckConstraint('base_price >= 0', name='ck_screenings_price_non_negative'),
        sa.ForeignKeyConstraint(['film_id'], ['films.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_screenings_film_id'), 'screenings', ['film_id'], unique=False)
    op.create_index(op.f('ix_screenings_room_id'), 'screenings', ['room_id'], unique=False)
    op.create_index(op.f('ix_screenings_starts_at'), 'screenings', ['starts_at'], unique=False)
    op.create_index('ix_screenings_room_window', 'screenings', ['room_id', 'starts_at', 'ends_at'], unique=False)

    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('screening_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('subtotal', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('total', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('payment_method', sa.String(length=20), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('confirmed_by', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('quantity >= 1', name='ck_reservations_quantity_positive'),
        sa.CheckConstraint('total >= 0', name='ck_reservations_total_non_negative'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['screening_id'], ['screenings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )
    op.create_index(op.f('ix_reservations_customer_id'), 'reservations', ['customer_id'], unique=False)
    op.create_index(op.f('ix_reservations_screening_id'), 'reservations', ['screening_id'], unique=False)
    op.create_index(op.f('ix_reservations_status'), 'reservations', ['status'], unique=False)
    # Expiry sweep looks up pending holds by deadline
    op.create_index('ix_reservations_pending_expiry', 'reservations', ['expires_at'], unique=False,
                    postgresql_where=sa.text("status = 'pending'"))


def downgrade() -> None:
    op.drop_index('ix_reservations_pending_expiry', table_name='reservations')
    op.drop_index(op.f('ix_reservations_status'), table_name='reservations')
    op.drop_index(op.f('ix_reservations_screening_id'), table_name='reservations')
    op.drop_index(op.f('ix_reservations_customer_id'), table_name='reservations')
    op.drop_table('reservations')
    op.drop_index('ix_screenings_room_window', table_name='screenings')
    op.drop_index(op.f('ix_screenings_starts_at'), table_name='screenings')
    op.drop_index(op.f('ix_screenings_room_id'), table_name='screenings')
    op.drop_index(op.f('ix_screenings_film_id'), table_name='screenings')
    op.drop_table('screenings')
    op.drop_table('customers')
    op.drop_table('rooms')
    op.drop_index(op.f('ix_films_title'), table_name='films')
    op.drop_table('films')
