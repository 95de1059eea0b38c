"""Initial schema with users, preferences, malls, stores, promotions

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create initial database schema."""
    op.execute("CREATE TYPE userrole AS ENUM ('USER', 'ADMIN')")

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('telegram_user_id', sa.BigInteger(), nullable=False),
        sa.Column('telegram_username', sa.String(length=100), nullable=True),
        sa.Column('full_name', sa.String(length=200), nullable=True),
        sa.Column('role', postgresql.ENUM('USER', 'ADMIN', name='userrole', create_type=False), nullable=False),
        sa.Column('last_location_lat', sa.Numeric(precision=9, scale=6), nullable=True),
        sa.Column('last_location_lon', sa.Numeric(precision=9, scale=6), nullable=True),
        sa.Column('last_location_updated', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('telegram_user_id')
    )
    op.create_index('ix_users_telegram_user_id', 'users', ['telegram_user_id'])
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'user_preferences',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('notifications_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notification_radius', sa.Integer(), nullable=False, server_default='4'),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('notification_radius BETWEEN 1 AND 50', name='check_notification_radius_range'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )
    op.create_index('ix_user_preferences_enabled', 'user_preferences', ['notifications_enabled'])

    op.create_table(
        'shopping_malls',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=300), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('latitude', sa.Numeric(precision=9, scale=6), nullable=False),
        sa.Column('longitude', sa.Numeric(precision=9, scale=6), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shopping_malls_name', 'shopping_malls', ['name'])
    op.create_index('ix_shopping_malls_location', 'shopping_malls', ['latitude', 'longitude'])

    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table(
        'stores',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('mall_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('floor', sa.String(length=50), nullable=True),
        sa.Column('location_in_mall', sa.String(length=100), nullable=True),
        sa.Column('contact_number', sa.String(length=30), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column('hours', sa.String(length=200), nullable=True),
        sa.Column('array_categories', postgresql.ARRAY(sa.String()), nullable=False, server_default='{}'),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['mall_id'], ['shopping_malls.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_stores_mall_id', 'stores', ['mall_id'])
    op.create_index('ix_stores_mall_name', 'stores', ['mall_id', 'name'])

    op.create_table(
        'promotions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('promotion_type', sa.String(length=50), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('favorites', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('start_date IS NULL OR start_date < end_date', name='check_promotion_date_range'),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_promotions_end_date', 'promotions', ['end_date'])
    op.create_index('ix_promotions_store_end', 'promotions', ['store_id', 'end_date'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('promotions')
    op.drop_table('stores')
    op.drop_table('categories')
    op.drop_table('shopping_malls')
    op.drop_table('user_preferences')
    op.drop_table('users')

    op.execute('DROP TYPE userrole')
