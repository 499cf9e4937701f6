"""
Forge API - Credential Store
==============================

What:  Lookup and insert of user records.
How:   One statement per call on the caller's AsyncSession. The caller owns
       the transaction (get_db_session commits it at the end of the request).

Name uniqueness is enforced by the database's unique index, not by a
read-then-write check here: of two concurrent inserts with the same name,
exactly one flush succeeds and the other raises ConflictError.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from forge_api.exceptions import ConflictError, DatabaseError, ValidationError
from forge_api.models.user import User

logger = logging.getLogger(__name__)


class UserStore:

    async def find_by_name(self, db: AsyncSession, name: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.name == name))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by name: %s", str(e))
            raise DatabaseError(context={"operation": "find_user_by_name"}) from e

    async def find_by_id(self, db: AsyncSession, user_id: UUID) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "find_user_by_id"}) from e

    async def insert(self, db: AsyncSession, name: str, password_hash: str) -> User:
        """
        Insert a new user and flush so the id is assigned and the unique
        index is checked before returning.

        Raises:
            ValidationError: empty name or digest.
            ConflictError: a user with this name already exists.
            DatabaseError: any other database failure.
        """
        if not name or not password_hash:
            raise ValidationError(message="Name and password must not be empty")

        user = User(name=name, password_hash=password_hash)
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.info("Registration rejected, name already taken: %s", name)
            raise ConflictError(
                message="A user with this name already exists",
                context={"name": name},
            ) from e
        except SQLAlchemyError as e:
            logger.error("Database error inserting user %s: %s", name, str(e))
            raise DatabaseError(context={"operation": "insert_user"}) from e

        logger.info("User created: %s (%s)", user.name, user.id)
        return user


user_store = UserStore()
