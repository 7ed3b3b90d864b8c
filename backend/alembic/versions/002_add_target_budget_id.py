"""Add target budget to user settings

Lets the user pick which YNAB budget the sync writes to. NULL keeps the
old behaviour of using the first budget of the token.

Revision ID: 002
Revises: 001
Create Date: 2025-09-14

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column('user_settings', sa.Column('target_budget_id', sa.String(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table('user_settings') as batch_op:
        batch_op.drop_column('target_budget_id')
