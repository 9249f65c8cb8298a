"""
NoteFlow Backend — Note SQLAlchemy Model
==========================================

What:  ORM model representing the `notes` table in PostgreSQL.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: Non-sequential (security), globally unique
    - summary / tags: Filled by the user after running the AI summarize and
      tags operations; the AI layer itself never writes here
    - tags as TEXT[]: Small ordered list of short strings, read together
      with the note, never queried on their own
    - updated_at: Refreshed by NoteService on every update

    Index on created_at DESC:
        The dashboard always lists newest notes first.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, Index, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from noteflow.database import Base

if TYPE_CHECKING:
    from noteflow.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A user's note.

    Query Patterns:
        - List notes: SELECT ... ORDER BY created_at DESC
          → Uses idx_notes_created_at
        - Get single note: SELECT ... WHERE id = :uuid
          → Uses primary key index
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    # Unbounded like content; titles are never indexed
    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    summary: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="AI-generated summary saved by the user",
    )

    tags: Mapped[List[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
        comment="Tags, in the order they were suggested or entered",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="notes")

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
        Index("idx_notes_user_id", user_id),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', user_id={self.user_id})>"
