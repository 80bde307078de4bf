"""create_documents_table

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

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
    """
    Create the documents table holding users, flats and messages.

    Documents are addressed by (collection, id). There are no foreign keys
    between documents; the application removes dependents itself.
    """
    op.create_table('documents',
        sa.Column('collection', sa.String(length=64), nullable=False),
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('collection', 'id')
    )
    op.create_index('idx_documents_collection', 'documents', ['collection'], unique=False)


def downgrade() -> None:
    """Drop the documents table."""
    op.drop_index('idx_documents_collection', table_name='documents')
    op.drop_table('documents')
