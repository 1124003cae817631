"""Add composite (siteid, date) index to mrtb

Revision ID: 0002
Revises: 0001
Create Date: 2026-01-12

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Latest-per-site and per-site detail queries scan by site, newest first
    op.create_index('ix_mrtb_siteid_date', 'mrtb', ['siteid', 'date'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_mrtb_siteid_date', table_name='mrtb')
