"""create modes and mode_prompts tables

Revision ID: 20261018_1010_create_modes
Revises: 20261018_1000_create_users
Create Date: 2026-10-18 10:10:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261018_1010_create_modes'
down_revision = '20261018_1000_create_users'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'modes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('description', sa.String(200), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_modes_user_id', 'modes', ['user_id'])
    op.create_index('ix_modes_user_active', 'modes', ['user_id', 'is_active'])
    # One live default per user
    op.create_index(
        'uq_modes_user_default',
        'modes',
        ['user_id'],
        unique=True,
        postgresql_where=sa.text('is_default AND is_active'),
    )

    op.create_table(
        'mode_prompts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mode_id', sa.Integer(), sa.ForeignKey('modes.id'), nullable=False),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_mode_prompts_mode_id', 'mode_prompts', ['mode_id'])

def downgrade() -> None:
    op.drop_index('ix_mode_prompts_mode_id', table_name='mode_prompts')
    op.drop_table('mode_prompts')
    op.drop_index('uq_modes_user_default', table_name='modes')
    op.drop_index('ix_modes_user_active', table_name='modes')
    op.drop_index('ix_modes_user_id', table_name='modes')
    op.drop_table('modes')
