"""Create records table

Revision ID: 5c2e9a7d41b0
Revises:
Create Date: 2026-10-19 10:12:31.118204

"""
from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5c2e9a7d41b0'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Key-value records for the XP ledger and post vote ledger."""
    op.create_table(
        'records',
        sa.Column('namespace', sa.String(length=32), nullable=False),
        sa.Column('key', sa.String(length=128), nullable=False),
        sa.Column(
            'payload',
            sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('namespace', 'key'),
    )
    op.create_index('ix_records_namespace', 'records', ['namespace'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_records_namespace', table_name='records')
    op.drop_table('records')
