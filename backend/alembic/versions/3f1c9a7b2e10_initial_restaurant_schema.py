"""initial_restaurant_schema

Revision ID: 3f1c9a7b2e10
Revises:
Create Date: 2025-03-02 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7b2e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False))
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('external_uid', sqlmodel.sql.sqltypes.AutoString(length=128), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('role', sa.Enum('USER', 'ADMIN', name='userrole'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_external_uid', 'users', ['external_uid'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('idx_user_email', 'users', ['email'], unique=False)

    op.create_table(
        'allowed_emails',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_allowed_emails_email', 'allowed_emails', ['email'], unique=True)

    op.create_table(
        'revoked_users',
        sa.Column('external_uid', sqlmodel.sql.sqltypes.AutoString(length=128), nullable=False),
        sa.Column('reason', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('revoked_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('external_uid'),
    )

    op.create_table(
        'restaurants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('address', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(length=30), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('sms_enabled', sa.Boolean(), nullable=False),
        sa.Column('sms_username', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('sms_password', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('sms_sender_id', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column('sms_credits', sa.Float(), nullable=False),
        sa.Column('sms_last_updated', sa.DateTime(), nullable=True),
        sa.Column('sms_confirmation_enabled', sa.Boolean(), nullable=False),
        sa.Column('sms_cancellation_enabled', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_restaurants_owner_id', 'restaurants', ['owner_id'], unique=False)

    op.create_table(
        'floors',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('type', sa.Enum('INDOOR', 'OUTDOOR', 'TERRACE', 'ROOFTOP', name='floortype'), nullable=False),
        sa.Column('color', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('restaurant_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_id', 'name', name='uq_floors_restaurant_name'),
    )
    op.create_index('ix_floors_restaurant_id', 'floors', ['restaurant_id'], unique=False)

    op.create_table(
        'restaurant_tables',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('restaurant_id', sa.Uuid(), nullable=False),
        sa.Column('floor_id', sa.Uuid(), nullable=True),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('x', sa.Float(), nullable=False),
        sa.Column('y', sa.Float(), nullable=False),
        sa.Column('status', sa.Enum('AVAILABLE', 'OCCUPIED', 'RESERVED', 'CLEANING', 'OUT_OF_SERVICE', name='tablestatus'), nullable=False),
        sa.Column('color', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column('is_merged', sa.Boolean(), nullable=False),
        sa.Column('merged_table_ids', sa.JSON(), nullable=False),
        sa.Column('parent_table_id', sa.Uuid(), nullable=True),
        sa.Column('is_hidden', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.ForeignKeyConstraint(['floor_id'], ['floors.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_id', 'name', name='uq_restaurant_tables_restaurant_name'),
    )
    op.create_index('ix_restaurant_tables_restaurant_id', 'restaurant_tables', ['restaurant_id'], unique=False)
    op.create_index('ix_restaurant_tables_floor_id', 'restaurant_tables', ['floor_id'], unique=False)
    op.create_index('ix_restaurant_tables_parent_table_id', 'restaurant_tables', ['parent_table_id'], unique=False)

    op.create_table(
        'shifts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('start_time', sqlmodel.sql.sqltypes.AutoString(length=5), nullable=False),
        sa.Column('end_time', sqlmodel.sql.sqltypes.AutoString(length=5), nullable=False),
        sa.Column('days', sa.JSON(), nullable=False),
        sa.Column('color', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('restaurant_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_shifts_restaurant_id', 'shifts', ['restaurant_id'], unique=False)

    op.create_table(
        'guests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(length=30), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('notes', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('visit_count', sa.Integer(), nullable=False),
        sa.Column('last_visit', sa.DateTime(), nullable=True),
        sa.Column('preferred_seating', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('dining_preferences', sa.JSON(), nullable=False),
        sa.Column('dietary_restrictions', sa.JSON(), nullable=False),
        sa.Column('allergies', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('is_vip', sa.Boolean(), nullable=False),
        sa.Column('restaurant_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_guests_restaurant_id', 'guests', ['restaurant_id'], unique=False)

    op.create_table(
        'reservations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('restaurant_id', sa.Uuid(), nullable=False),
        sa.Column('guest_id', sa.Uuid(), nullable=False),
        sa.Column('table_id', sa.Uuid(), nullable=True),
        sa.Column('shift_id', sa.Uuid(), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('number_of_guests', sa.Integer(), nullable=False),
        sa.Column('note', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'CONFIRMED', 'SEATED', 'COMPLETED', 'CANCELLED', 'NO_SHOW', name='reservationstatus'), nullable=False),
        sa.Column('source', sa.Enum('PHONE', 'WALK_IN', 'ONLINE', 'OTHER', name='reservationsource'), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.ForeignKeyConstraint(['guest_id'], ['guests.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['table_id'], ['restaurant_tables.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['shift_id'], ['shifts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_reservation_restaurant_date', 'reservations', ['restaurant_id', 'date'], unique=False)
    op.create_index('idx_reservation_shift', 'reservations', ['shift_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_reservation_shift', table_name='reservations')
    op.drop_index('idx_reservation_restaurant_date', table_name='reservations')
    op.drop_table('reservations')
    op.drop_index('ix_guests_restaurant_id', table_name='guests')
    op.drop_table('guests')
    op.drop_index('ix_shifts_restaurant_id', table_name='shifts')
    op.drop_table('shifts')
    op.drop_index('ix_restaurant_tables_parent_table_id', table_name='restaurant_tables')
    op.drop_index('ix_restaurant_tables_floor_id', table_name='restaurant_tables')
    op.drop_index('ix_restaurant_tables_restaurant_id', table_name='restaurant_tables')
    op.drop_table('restaurant_tables')
    op.drop_index('ix_floors_restaurant_id', table_name='floors')
    op.drop_table('floors')
    op.drop_index('ix_restaurants_owner_id', table_name='restaurants')
    op.drop_table('restaurants')
    op.drop_table('revoked_users')
    op.drop_index('ix_allowed_emails_email', table_name='allowed_emails')
    op.drop_table('allowed_emails')
    op.drop_index('idx_user_email', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_external_uid', table_name='users')
    op.drop_table('users')
