"""
Forge API - Note Service
==========================

What:  CRUD operations for notes.
How:   Single-statement queries on the request's AsyncSession. Missing rows
       become NotFoundError; driver failures become DatabaseError with the
       driver message kept out of the response.
Who:   Called by the /notes route handlers.

NoteService is stateless; the session is passed into every call.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from forge_api.exceptions import DatabaseError, NotFoundError
from forge_api.models.note import Note
from forge_api.schemas.note import NoteChangeset, NoteResponse

logger = logging.getLogger(__name__)


class NoteService:
    """Business logic layer for note operations."""

    async def create_note(self, db: AsyncSession, changeset: NoteChangeset) -> NoteResponse:
        note = Note(text=changeset.text)
        db.add(note)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e))
            raise DatabaseError(
                message="Could not create the note. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Note created: %s", note.id)
        return NoteResponse.model_validate(note)

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        try:
            result = await db.execute(select(Note))
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, db: AsyncSession, note_id: UUID) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: Note with given ID does not exist (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return NoteResponse.model_validate(note)

    async def update_note(
        self, db: AsyncSession, note_id: UUID, changeset: NoteChangeset
    ) -> NoteResponse:
        """
        Replace the text of an existing note.

        Raises:
            NotFoundError: no note with this ID (→ 404)
            DatabaseError: the update failed (→ 500)
        """
        try:
            result = await db.execute(
                update(Note)
                .where(Note.id == note_id)
                .values(text=changeset.text)
                .returning(Note.id)
            )
            updated_id = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": str(note_id)},
            ) from e

        if updated_id is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        logger.info("Note updated: %s", note_id)
        return NoteResponse(id=updated_id, text=changeset.text)

    async def delete_note(self, db: AsyncSession, note_id: UUID) -> None:
        """
        Delete a note.

        Raises:
            NotFoundError: no note with this ID (→ 404)
            DatabaseError: the delete failed (→ 500)
        """
        try:
            result = await db.execute(
                delete(Note).where(Note.id == note_id).returning(Note.id)
            )
            deleted_id = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id)},
            ) from e

        if deleted_id is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        logger.info("Note deleted: %s", note_id)


note_service = NoteService()
