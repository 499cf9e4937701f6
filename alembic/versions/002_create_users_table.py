"""Create users table

Revision ID: 002
Revises: 001
Create Date: 2025-03-09 00:00:00.000000+00:00

Creates the `users` credential table. The unique constraint on name is what
decides between two concurrent registrations of the same name.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique user identifier",
        ),
        sa.Column(
            "name",
            sa.String(255),
            nullable=False,
            comment="Unique display name used to log in",
        ),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="bcrypt digest of the user's password",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_users_name"),
        sa.CheckConstraint("name <> ''", name="ck_users_name_not_empty"),
        sa.CheckConstraint("password_hash <> ''", name="ck_users_password_hash_not_empty"),
    )


def downgrade() -> None:
    op.drop_table("users")
