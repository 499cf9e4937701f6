"""
Forge API - User SQLAlchemy Model
===================================

What:  ORM model for the `users` table (the credential store).
Who:   Used by the user store during registration and login, and by Alembic.

Table Design:
    - id:            UUID primary key, assigned once at creation and never changed
    - name:          unique display name; the unique index is what settles two
                     concurrent registrations of the same name
    - password_hash: bcrypt digest; the plaintext is never stored

Lifecycle:
    Created on registration, read on login. Users are never updated or
    deleted by the API.
"""

import uuid

from sqlalchemy import CheckConstraint, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from forge_api.database import Base


class User(Base):
    """A registered user."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique user identifier",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Unique display name used to log in",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt digest of the user's password",
    )

    __table_args__ = (
        CheckConstraint("name <> ''", name="ck_users_name_not_empty"),
        CheckConstraint("password_hash <> ''", name="ck_users_password_hash_not_empty"),
    )

    def __repr__(self) -> str:
        # password_hash is left out so it never lands in a log line
        return f"<User(id={self.id}, name='{self.name}')>"
