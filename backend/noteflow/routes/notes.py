"""
NoteFlow Backend — Notes Route Handlers
=========================================

What:  CRUD endpoints for notes.
         GET    /notes          list all notes (newest first)
         POST   /notes          create a note
         GET    /notes/{id}     fetch one note
         PUT    /notes/{id}     update title/content/summary/tags
         DELETE /notes/{id}     delete a note
How:   Validates presence of required fields, delegates to NoteService,
       serializes ORM objects through NoteResponse.
Who:   Called by the dashboard frontend.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noteflow.database import get_db_session
from noteflow.exceptions import AuthenticationError, ValidationError
from noteflow.schemas.ai import ErrorResponse
from noteflow.schemas.note import (
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from noteflow.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List notes, newest first",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    # TODO: filter by the signed-in user once sessions carry an identity
    notes = await note_service.list_notes(db)
    return [NoteResponse.model_validate(note) for note in notes]


@router.post(
    "",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Title or content missing", "model": ErrorResponse},
        401: {"description": "No acting user", "model": ErrorResponse},
        404: {"description": "Acting user does not exist", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    body: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    if not body.title or not body.content:
        raise ValidationError(message="Title and content are required")
    if not body.user_id:
        raise AuthenticationError(message="User ID is required. Please sign in.")

    note = await note_service.create_note(
        db=db,
        title=body.title,
        content=body.content,
        user_id=body.user_id,
    )
    return NoteResponse.model_validate(note)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    note = await note_service.get_note(db, note_id)
    return NoteResponse.model_validate(note)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a note",
    description="Only fields present in the body are changed. `summary: null` removes a saved summary.",
)
async def update_note(
    note_id: str,
    body: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    note = await note_service.update_note(
        db,
        note_id,
        title=body.title,
        content=body.content,
        summary=body.summary,
        tags=body.tags,
        clear_summary="summary" in body.model_fields_set and body.summary is None,
    )
    return NoteResponse.model_validate(note)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await note_service.delete_note(db, note_id)
    return MessageResponse(message="Note deleted successfully")
