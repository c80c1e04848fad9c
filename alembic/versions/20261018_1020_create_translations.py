"""create translations table

Revision ID: 20261018_1020_create_translations
Revises: 20261018_1010_create_modes
Create Date: 2026-10-18 10:20:00
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = '20261018_1020_create_translations'
down_revision = '20261018_1010_create_modes'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'translations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('mode', sa.String(50), nullable=False),
        sa.Column('mode_id', sa.Integer(), sa.ForeignKey('modes.id'), nullable=True),
        sa.Column('translation_input', sa.Text(), nullable=False),
        sa.Column('translation_output', JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('selected_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_translations_user_id', 'translations', ['user_id'])
    op.create_index(
        'ix_translations_user_active_created',
        'translations',
        ['user_id', 'is_active', 'created_at'],
    )

def downgrade() -> None:
    op.drop_index('ix_translations_user_active_created', table_name='translations')
    op.drop_index('ix_translations_user_id', table_name='translations')
    op.drop_table('translations')
