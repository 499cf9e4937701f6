"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2025-03-02 00:00:00.000000+00:00

Creates the `notes` table: UUID primary key generated by PostgreSQL and a
non-empty text body.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique note identifier",
        ),
        sa.Column(
            "text",
            sa.Text(),
            nullable=False,
            comment="Note body",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop the notes table. Destructive: all notes are lost."""
    op.drop_table("notes")
