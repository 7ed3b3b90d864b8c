"""Initial schema

Creates the tables of the YNAB investments sync.

Tables:
    - assets: Holdings (symbol + amount) linked to a YNAB account
    - user_settings: YNAB token and sync schedule (single row expected)

Revision ID: 001
Revises: None
Create Date: 2025-08-05

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SYNC_SCHEDULE_VALUES = (
    'daily',
    'every_two_days',
    'weekly',
    'every_two_weeks',
    'monthly_first',
    'monthly_last',
)


def upgrade() -> None:
    # ==========================================================================
    # ASSETS
    # ==========================================================================
    op.create_table(
        'assets',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('symbol', sa.String(), nullable=False),
        sa.Column('amount', sa.Numeric(18, 8), nullable=False),
        sa.Column('ynab_account_id', sa.String(36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_assets_amount_positive'),
    )
    op.create_index('ix_assets_symbol', 'assets', ['symbol'])
    op.create_index('ix_assets_ynab_account_id', 'assets', ['ynab_account_id'])

    # ==========================================================================
    # USER SETTINGS
    # ==========================================================================
    op.create_table(
        'user_settings',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('ynab_api_token', sa.String(), nullable=False),
        sa.Column(
            'sync_schedule',
            sa.Enum(*SYNC_SCHEDULE_VALUES, name='sync_schedule'),
            nullable=False,
            server_default='daily',
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('user_settings')
    sa.Enum(name='sync_schedule').drop(op.get_bind(), checkfirst=True)

    op.drop_index('ix_assets_ynab_account_id', table_name='assets')
    op.drop_index('ix_assets_symbol', table_name='assets')
    op.drop_table('assets')
