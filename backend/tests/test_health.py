"""
NoteFlow Backend — Health and Middleware Tests
================================================

What:  GET /health status levels, plus the rate limiter's 429 envelope.
How:   The module-level engine in noteflow.routes.health is patched, so
       no database is needed.
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from noteflow import __version__
from noteflow.middleware.logging import ai_operation, level_for_status
from noteflow.middleware.rate_limit import RateLimitMiddleware, SlidingWindow


def engine_ok():
    engine = MagicMock()
    engine.connect.return_value.__aenter__.return_value = AsyncMock()
    return engine


def engine_down():
    engine = MagicMock()
    engine.connect.side_effect = OSError("Connection refused")
    return engine


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        with patch("noteflow.routes.health.engine", engine_ok()):
            response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["database"] == "connected"
        assert body["completion_provider"] == "available"
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_unconfigured_provider_is_degraded(self, test_client, fake_completion_client):
        fake_completion_client.configured = False

        with patch("noteflow.routes.health.engine", engine_ok()):
            response = await test_client.get("/health")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["completion_provider"] == "unconfigured"

    @pytest.mark.asyncio
    async def test_unreachable_provider_is_degraded(self, test_client, fake_completion_client):
        fake_completion_client.health_check = AsyncMock(return_value=False)

        with patch("noteflow.routes.health.engine", engine_ok()):
            response = await test_client.get("/health")

        assert response.json()["completion_provider"] == "unavailable"
        assert response.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_database_down_is_unhealthy(self, test_client):
        with patch("noteflow.routes.health.engine", engine_down()):
            response = await test_client.get("/health")

        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["database"] == "disconnected"


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_429_uses_error_envelope(self):
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, max_requests=2, window_seconds=60)

        @app.post("/ai/tags")
        async def tags():
            return {"tags": []}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.post("/ai/tags")).status_code for _ in range(3)]
            limited = await client.post("/ai/tags")

        assert statuses == [200, 200, 429]
        assert limited.status_code == 429
        assert limited.json()["error"].startswith("Too many requests")
        assert set(limited.json()) == {"error", "details"}
        assert int(limited.headers["Retry-After"]) > 0

    @pytest.mark.asyncio
    async def test_non_ai_paths_are_not_limited(self):
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, max_requests=1, window_seconds=60)

        @app.get("/notes")
        async def notes():
            return []

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = {(await client.get("/notes")).status_code for _ in range(3)}

        assert statuses == {200}


class TestSlidingWindow:

    def test_window_expires(self):
        window = SlidingWindow(limit=2, window_seconds=10)

        assert window.hit("a", now=0.0) == (True, 0)
        assert window.hit("a", now=1.0) == (True, 0)
        assert window.hit("a", now=2.0) == (False, 8)
        assert window.hit("a", now=10.5) == (True, 0)

    def test_clients_counted_separately(self):
        window = SlidingWindow(limit=1, window_seconds=10)

        assert window.hit("a", now=0.0)[0]
        assert window.hit("b", now=0.0)[0]
        assert not window.hit("a", now=1.0)[0]


class TestAccessLogHelpers:

    @pytest.mark.parametrize(
        "path, expected",
        [("/ai/summarize", "summarize"), ("/ai/", ""), ("/notes", ""), ("/x/ai/tags", "")],
    )
    def test_ai_operation(self, path, expected):
        assert ai_operation(path) == expected

    def test_level_for_status(self):
        assert level_for_status(200) == logging.INFO
        assert level_for_status(404) == logging.WARNING
        assert level_for_status(502) == logging.ERROR
