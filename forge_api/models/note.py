"""
Forge API - Note SQLAlchemy Model
===================================

What:  ORM model for the `notes` table.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - id:   UUID primary key, generated when the row is created
    - text: note body, never empty (enforced by the API schema)
"""

import uuid

from sqlalchemy import Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from forge_api.database import Base


class Note(Base):
    """A single note. Any authenticated user may update or delete it."""

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique note identifier",
    )

    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note body",
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id})>"
