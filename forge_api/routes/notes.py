"""
Forge API - Notes Route Handlers
==================================

What:  CRUD endpoints for notes.
How:   Extract path/body, delegate to NoteService, return JSON.

Route Inventory:
    POST   /notes        create            (open)
    GET    /notes        list all          (open)
    GET    /notes/{id}   read one          (open)
    PUT    /notes/{id}   replace text      (requires token)
    DELETE /notes/{id}   delete            (requires token)

The protected routes carry require_authenticated_user as a route dependency,
so a missing or invalid token is answered with 401 before the handler runs.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from forge_api.database import get_db_session
from forge_api.middleware.auth import require_authenticated_user
from forge_api.schemas.note import ErrorResponse, NoteChangeset, NoteResponse
from forge_api.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

_UNAUTHORIZED = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    summary="Create a note",
)
async def create_note(
    changeset: NoteChangeset,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db=db, changeset=changeset)


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    summary="List all notes",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    notes = await note_service.list_notes(db=db)
    logger.debug("Responding with %d notes", len(notes))
    return notes


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses=_NOT_FOUND,
    summary="Get a single note by ID",
)
async def get_note(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """Invalid UUIDs in the path are rejected by FastAPI with 422."""
    return await note_service.get_note(db=db, note_id=note_id)


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_UNAUTHORIZED, **_NOT_FOUND},
    dependencies=[Depends(require_authenticated_user)],
    summary="Replace the text of a note",
)
async def update_note(
    note_id: UUID,
    changeset: NoteChangeset,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db=db, note_id=note_id, changeset=changeset)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses={**_UNAUTHORIZED, **_NOT_FOUND},
    dependencies=[Depends(require_authenticated_user)],
    summary="Delete a note",
)
async def delete_note(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db=db, note_id=note_id)
    return Response(status_code=204)
