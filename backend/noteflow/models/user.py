"""
NoteFlow Backend — User SQLAlchemy Model
==========================================

What:  ORM model representing the `users` table.
Why:   Notes belong to a user; sign-in checks a stored bcrypt hash.
Who:   Used by AuthService (sign-in, provisioning) and NoteService (ownership check).

Security:
    `password` holds a bcrypt hash, never plaintext. It is never part of any
    API response schema.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from noteflow.database import Base

if TYPE_CHECKING:
    from noteflow.models.note import Note


class User(Base):
    """An account that owns notes."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    # Stored lowercase; sign-in lowercases the submitted address before lookup
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login email, stored lowercase",
    )

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the user's password",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    notes: Mapped[List["Note"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
