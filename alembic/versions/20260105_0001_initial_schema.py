"""Initial schema - site, mrtb and ctrl tables

Revision ID: 0001
Revises:
Create Date: 2026-01-05

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Site directory
    op.create_table(
        'site',
        sa.Column('site', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint('site')
    )

    # Sensor readings (values kept as reported text)
    op.create_table(
        'mrtb',
        sa.Column('index', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('siteid', sa.String(length=20), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hepres', sa.String(length=32), nullable=True),
        sa.Column('heleve', sa.String(length=32), nullable=True),
        sa.Column('actemp', sa.String(length=32), nullable=True),
        sa.Column('achumi', sa.String(length=32), nullable=True),
        sa.PrimaryKeyConstraint('index')
    )
    op.create_index('ix_mrtb_siteid', 'mrtb', ['siteid'], unique=False)
    op.create_index('ix_mrtb_date', 'mrtb', ['date'], unique=False)

    # Alert thresholds, site '000' is the fleet default
    op.create_table(
        'ctrl',
        sa.Column('site', sa.String(length=20), nullable=False),
        sa.Column('mrplel', sa.String(length=32), nullable=True),
        sa.Column('mrpleh', sa.String(length=32), nullable=True),
        sa.Column('mrlevl', sa.String(length=32), nullable=True),
        sa.Column('mrlevh', sa.String(length=32), nullable=True),
        sa.PrimaryKeyConstraint('site')
    )


def downgrade() -> None:
    op.drop_table('ctrl')
    op.drop_index('ix_mrtb_date', table_name='mrtb')
    op.drop_index('ix_mrtb_siteid', table_name='mrtb')
    op.drop_table('mrtb')
    op.drop_table('site')
