"""create users table

Revision ID: 20261018_1000_create_users
Revises:
Create Date: 2026-10-18 10:00:00
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = '20261018_1000_create_users'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('phone_number', sa.String(20), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('push_token', sa.String(512), nullable=True),
        sa.Column('notification_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('preferred_mode', sa.String(20), nullable=False, server_default='personal'),
        sa.Column('context_training', JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('translation_ids', JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_phone_number', 'users', ['phone_number'], unique=True)
    op.create_index('ix_users_is_active', 'users', ['is_active'])
    op.create_unique_constraint('uq_users_email', 'users', ['email'])

def downgrade() -> None:
    op.drop_constraint('uq_users_email', 'users', type_='unique')
    op.drop_index('ix_users_is_active', table_name='users')
    op.drop_index('ix_users_phone_number', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
