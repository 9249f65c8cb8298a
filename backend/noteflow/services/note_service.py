"""
NoteFlow Backend — Note Service (Persistence Logic)
=====================================================

What:  Create, read, update and delete notes.
Why:   Encapsulates all note persistence rules, independent of HTTP concerns.
How:   Receives an AsyncSession per call and works on ORM objects.
Who:   Called by the /notes route handlers.

Ownership:
    A note can only be created for a user that already exists. Whether the
    acting user exists is a precondition established by sign-in; this service
    checks it and refuses otherwise. No user is ever created implicitly here.

Design Decision:
    NoteService is stateless — it receives the db session for each call.
    This enables:
    1. Easy testing: Mock the session independently
    2. Transaction safety: Each call gets its own session
    3. No thread-safety concerns: No shared mutable state
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Union

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from noteflow.exceptions import DatabaseError, NotFoundError, NoteFlowError
from noteflow.models import Note, User

logger = logging.getLogger(__name__)

USER_NOT_FOUND_MESSAGE = "User not found. Please sign in again."
NOTE_NOT_FOUND_MESSAGE = "Note not found"

# Path segments arrive as text; anything that is not a UUID cannot name a note
NoteId = Union[str, uuid.UUID]


def _parse_uuid(value: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        Missing rows become NotFoundError (404). Our own exceptions propagate
        unchanged; anything else is logged and wrapped in DatabaseError so
        SQL details never reach the client.
    """

    async def list_notes(self, db: AsyncSession) -> List[Note]:
        """
        All notes, newest first, each with its owner loaded.

        Query plan:
            SELECT * FROM notes ORDER BY created_at DESC
            → Uses idx_notes_created_at
        """
        try:
            result = await db.execute(
                select(Note)
                .options(selectinload(Note.user))
                .order_by(desc(Note.created_at))
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch notes",
                context={"error_type": type(e).__name__},
            )

    async def create_note(
        self,
        db: AsyncSession,
        title: str,
        content: str,
        user_id: str,
    ) -> Note:
        """
        Create a note owned by an existing user.

        Raises:
            NotFoundError: user_id is malformed or no such user exists
            DatabaseError: insert failed
        """
        owner_id = _parse_uuid(user_id)
        if owner_id is None:
            raise NotFoundError(resource="user", resource_id=user_id, message=USER_NOT_FOUND_MESSAGE)

        try:
            user = await db.get(User, owner_id)
            if user is None:
                raise NotFoundError(
                    resource="user",
                    resource_id=str(owner_id),
                    message=USER_NOT_FOUND_MESSAGE,
                )

            # Timestamps and id are set here rather than left to flush so the
            # returned object is complete even before the transaction commits
            now = datetime.now(timezone.utc)
            note = Note(
                id=uuid.uuid4(),
                title=title,
                content=content,
                tags=[],
                user_id=user.id,
                created_at=now,
                updated_at=now,
            )
            note.user = user
            db.add(note)
            await db.flush()
            logger.info("Note created: %s (user=%s)", note.id, user.id)
            return note

        except NoteFlowError:
            raise
        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create note",
                context={"error_type": type(e).__name__},
            )

    async def get_note(self, db: AsyncSession, note_id: NoteId) -> Note:
        """
        Retrieve a single note (with owner) by ID.

        Raises:
            NotFoundError: ID is malformed or no such note exists (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        parsed_id = _parse_uuid(note_id)
        if parsed_id is None:
            raise NotFoundError(
                resource="note",
                resource_id=str(note_id),
                message=NOTE_NOT_FOUND_MESSAGE,
            )

        try:
            result = await db.execute(
                select(Note)
                .options(selectinload(Note.user))
                .where(Note.id == parsed_id)
            )
            note = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Failed to fetch note",
                context={"note_id": str(note_id)},
            )

        if note is None:
            raise NotFoundError(
                resource="note",
                resource_id=str(note_id),
                message=NOTE_NOT_FOUND_MESSAGE,
            )
        return note

    async def update_note(
        self,
        db: AsyncSession,
        note_id: NoteId,
        title: Optional[str] = None,
        content: Optional[str] = None,
        summary: Optional[str] = None,
        tags: Optional[List[str]] = None,
        clear_summary: bool = False,
    ) -> Note:
        """
        Change only the fields that were supplied and refresh updated_at.

        `summary=None` leaves the summary alone; pass `clear_summary=True`
        to remove a saved summary.
        """
        note = await self.get_note(db, note_id)

        if title is not None:
            note.title = title
        if content is not None:
            note.content = content
        if summary is not None:
            note.summary = summary
        elif clear_summary:
            note.summary = None
        if tags is not None:
            note.tags = list(tags)
        note.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except Exception as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update note",
                context={"note_id": str(note_id)},
            )
        logger.info("Note updated: %s", note_id)
        return note

    async def delete_note(self, db: AsyncSession, note_id: NoteId) -> None:
        note = await self.get_note(db, note_id)
        try:
            await db.delete(note)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete note",
                context={"note_id": str(note_id)},
            )
        logger.info("Note deleted: %s", note_id)


# Stateless; one shared instance is enough
note_service = NoteService()
