"""Add outlets.priority

Revision ID: 8c2e5b1a4d93
Revises: 3f9a1c2d7e40
Create Date: 2026-10-19 14:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c2e5b1a4d93'
down_revision: Union[str, Sequence[str], None] = '3f9a1c2d7e40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column('outlets', sa.Column('priority', sa.Text(), nullable=False, server_default='medium'))


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column('outlets', 'priority')
