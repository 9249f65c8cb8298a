# Models package init
"""
NoteFlow Backend — ORM Models
===============================

Both models are imported here so that the `User.notes` / `Note.user`
relationship strings resolve no matter which model a caller imports first.
"""

from noteflow.models.user import User
from noteflow.models.note import Note

__all__ = ["User", "Note"]
