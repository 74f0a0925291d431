"""create goals and runs tables

Revision ID: 4e1c7a9d2b60
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4e1c7a9d2b60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()
    if 'goals' not in tables:
        op.create_table(
            'goals',
            sa.Column('id', sa.String(32), primary_key=True, nullable=False),
            sa.Column('user_id', sa.String(), nullable=False, index=True),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.String(), nullable=True),
            sa.Column('type', sa.String(20), nullable=False),
            sa.Column('period', sa.String(20), nullable=False),
            sa.Column('target_value', sa.Float(), nullable=False),
            sa.Column('target_unit', sa.String(20), nullable=False),
            sa.Column('start_date', sa.DateTime(), nullable=False),
            sa.Column('end_date', sa.DateTime(), nullable=False),
            sa.Column('current_value', sa.Float(), nullable=False, server_default='0'),
            sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('completed_at', sa.DateTime(), nullable=True),
            sa.Column('color', sa.String(20), nullable=True),
            sa.Column('icon', sa.String(20), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )
    if 'runs' not in tables:
        op.create_table(
            'runs',
            sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
            sa.Column('user_id', sa.String(), nullable=False, index=True),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('notes', sa.String(), nullable=True),
            sa.Column('distance_mi', sa.Numeric(5, 2), nullable=False),
            sa.Column('duration_seconds', sa.Integer(), nullable=False),
            sa.Column('run_type', sa.String(20), nullable=False, server_default='easy'),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )


def downgrade() -> None:
    # Safe drop if exists
    op.execute('DROP TABLE IF EXISTS runs')
    op.execute('DROP TABLE IF EXISTS goals')
