"""
NoteFlow Backend — Note Request/Response Schemas
==================================================

What:  Pydantic models defining the notes API contract.
Why:   Input validation, camelCase serialization, and OpenAPI doc generation.
How:   Responses are built straight from ORM objects (`from_attributes`);
       JSON keys follow the frontend's camelCase convention.

Design Decision:
    Schemas are separate from SQLAlchemy models so that internal columns
    (the owner's password hash in particular) can never leak into a response.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from noteflow.schemas.ai import CamelModel


class NoteOwner(CamelModel):
    """Public subset of the owning user embedded in every note."""
    name: Optional[str] = None
    email: str

    model_config = ConfigDict(from_attributes=True)


class NoteResponse(CamelModel):
    """
    What:  Full representation of a note.
    Who:   Returned by every /notes endpoint that yields a note.
    """
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str
    summary: Optional[str] = Field(default=None, description="Saved AI summary, if any")
    tags: List[str] = Field(default_factory=list)
    user_id: uuid.UUID = Field(description="Owning user's ID")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")
    user: NoteOwner

    model_config = ConfigDict(from_attributes=True)


class NoteCreate(CamelModel):
    """
    Body of POST /notes.

    Fields are Optional so the route can answer with its own 400/401
    messages instead of FastAPI's 422.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    user_id: Optional[str] = Field(default=None, description="Acting user's ID (from sign-in)")


class NoteUpdate(CamelModel):
    """Body of PUT /notes/{id}. Only fields that are present are changed."""
    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    tags: Optional[List[str]] = None


class MessageResponse(CamelModel):
    message: str
