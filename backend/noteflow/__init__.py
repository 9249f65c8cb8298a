"""
NoteFlow Backend — Application Package Initializer
====================================================

What: Marks the `noteflow` directory as a Python package.
Why:  Enables module imports like `from noteflow.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │     Routes (API Layer / Gateway)    │  ← HTTP concerns, request validation
    ├─────────────────────────────────────┤
    │   Services (AI operations, notes)   │  ← Prompt building, orchestration
    ├─────────────────────────────────────┤
    │  Completion Client  │  Persistence  │  ← OpenAI chat API / SQLAlchemy
    └─────────────────────────────────────┘

    The AI path never touches the database and the notes path never calls
    the completion provider; the two meet only in the client UI.
"""

__version__ = "1.0.0"
