"""
NoteFlow Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (fake completion client, mocked
       DB session, ORM samples, API client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── fake_completion_client: Records calls, returns canned text or raises
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── sample_user / sample_note: Real ORM instances, never persisted
    ├── app: create_app() wired to the fake client
    └── test_client: HTTPX AsyncClient talking to `app` in-process

Nothing here opens a network connection, touches a database or needs a
real OPENAI_API_KEY.
"""

import os

# Must be set before anything imports noteflow.config
os.environ["OPENAI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt minimum; keeps hashing fast
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from noteflow.main import create_app
from noteflow.models import Note, User
from noteflow.schemas.ai import Message
from noteflow.services.auth_service import hash_password
from noteflow.services.llm_base import CompletionClient


# ══════════════════════════════════════════════════════════════════════════
# Fake Completion Client
# ══════════════════════════════════════════════════════════════════════════

class FakeCompletionClient(CompletionClient):
    """
    In-memory CompletionClient.

    Usage:
        fake.response = "budget, Q3"        # next complete() returns this
        fake.error = CompletionError("boom") # next complete() raises this
        fake.calls[0]["temperature"]         # what was sent
    """

    def __init__(
        self,
        response: str = "",
        error: Optional[Exception] = None,
        configured: bool = True,
    ):
        self.response = response
        self.error = error
        self.configured = configured
        self.calls: List[Dict[str, Any]] = []

    async def complete(
        self,
        messages: Sequence[Message],
        temperature: float,
        max_tokens: Optional[int] = None,
    ) -> str:
        self.calls.append(
            {
                "messages": list(messages),
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response

    async def health_check(self) -> bool:
        return self.configured

    @property
    def is_configured(self) -> bool:
        return self.configured


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_completion_client():
    return FakeCompletionClient(response="stub response")


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
        result = await note_service.get_note(mock_db_session, note_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock())
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_user():
    return User(
        id=uuid4(),
        email="demo@noteflow.com",
        name="Demo User",
        password=hash_password("correct horse", rounds=4),
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def sample_note(sample_user):
    now = datetime.now(timezone.utc)
    note = Note(
        id=uuid4(),
        title="Q3 planning",
        content="Meeting notes about Q3 budget planning and revenue targets",
        summary=None,
        tags=["budget"],
        user_id=sample_user.id,
        created_at=now,
        updated_at=now,
    )
    note.user = sample_user
    return note


@pytest.fixture
def app(fake_completion_client):
    return create_app(completion_client=fake_completion_client)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
