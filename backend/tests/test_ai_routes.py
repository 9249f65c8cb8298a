"""
NoteFlow Backend — AI Gateway Endpoint Tests
==============================================

What:  HTTP-level tests for POST /ai/* through the full middleware stack.
How:   create_app() wired to FakeCompletionClient (or an unconfigured
       OpenAICompletionClient), driven by httpx.AsyncClient + ASGITransport.

What we test:
    ✅ Missing/empty required fields → 400, zero completion calls
    ✅ camelCase request and response bodies
    ✅ Configuration and provider failures → 500 {error, details}
    ✅ Malformed bodies → 400 envelope (never FastAPI's 422)
"""

import pytest
from httpx import AsyncClient, ASGITransport

from noteflow.exceptions import CompletionError
from noteflow.main import create_app
from noteflow.services.openai_service import OpenAICompletionClient


MISSING_FIELD_CASES = [
    ("/ai/summarize", {}, "Content is required"),
    ("/ai/summarize", {"content": ""}, "Content is required"),
    ("/ai/generate", {}, "Prompt is required"),
    ("/ai/generate", {"prompt": "", "context": "ctx"}, "Prompt is required"),
    ("/ai/improve", {"instruction": "shorter"}, "Content is required"),
    ("/ai/improve", {"content": ""}, "Content is required"),
    ("/ai/answer", {"question": "Why?"}, "Question and context are required"),
    ("/ai/answer", {"context": "something"}, "Question and context are required"),
    ("/ai/answer", {"question": "", "context": "something"}, "Question and context are required"),
    ("/ai/tags", {"maxTags": 3}, "Content is required"),
    ("/ai/tags", {"content": ""}, "Content is required"),
]


class TestValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path, body, message", MISSING_FIELD_CASES)
    async def test_missing_required_field_rejected_without_provider_call(
        self, test_client, fake_completion_client, path, body, message
    ):
        response = await test_client.post(path, json=body)

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert fake_completion_client.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path, message",
        [
            ("/ai/summarize", "Content is required"),
            ("/ai/generate", "Prompt is required"),
            ("/ai/improve", "Content is required"),
            ("/ai/answer", "Question and context are required"),
            ("/ai/tags", "Content is required"),
        ],
    )
    async def test_empty_post_gets_field_message(
        self, test_client, fake_completion_client, path, message
    ):
        response = await test_client.post(path)

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert fake_completion_client.calls == []

    @pytest.mark.asyncio
    async def test_malformed_json_is_400_envelope(self, test_client, fake_completion_client):
        response = await test_client.post(
            "/ai/summarize",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"
        assert "details" in response.json()
        assert fake_completion_client.calls == []

    @pytest.mark.asyncio
    async def test_wrong_field_type_is_400_envelope(self, test_client, fake_completion_client):
        response = await test_client.post(
            "/ai/tags", json={"content": "x", "maxTags": "several"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"
        assert fake_completion_client.calls == []


class TestOperations:

    @pytest.mark.asyncio
    async def test_tags_from_meeting_notes(self, test_client, fake_completion_client):
        fake_completion_client.response = "budget, Q3, planning, revenue, finance"

        response = await test_client.post(
            "/ai/tags",
            json={"content": "Meeting notes about Q3 budget planning and revenue targets"},
        )

        assert response.status_code == 200
        assert response.json() == {"tags": ["budget", "Q3", "planning", "revenue", "finance"]}
        assert len(fake_completion_client.calls) == 1

    @pytest.mark.asyncio
    async def test_tags_respect_max_tags(self, test_client, fake_completion_client):
        fake_completion_client.response = "a, b, c, d"

        response = await test_client.post("/ai/tags", json={"content": "x", "maxTags": 2})

        assert response.json() == {"tags": ["a", "b"]}
        assert "up to 2" in fake_completion_client.calls[0]["messages"][0].content

    @pytest.mark.asyncio
    async def test_null_max_tags_uses_default(self, test_client, fake_completion_client):
        fake_completion_client.response = "a, b, c, d, e, f"

        response = await test_client.post("/ai/tags", json={"content": "x", "maxTags": None})

        assert response.status_code == 200
        assert response.json() == {"tags": ["a", "b", "c", "d", "e"]}
        assert "up to 5" in fake_completion_client.calls[0]["messages"][0].content

    @pytest.mark.asyncio
    async def test_null_max_length_uses_default(self, test_client, fake_completion_client):
        fake_completion_client.response = "Short."

        response = await test_client.post(
            "/ai/summarize", json={"content": "Some text.", "maxLength": None}
        )

        assert response.status_code == 200
        assert "approximately 200 words" in fake_completion_client.calls[0]["messages"][1].content

    @pytest.mark.asyncio
    async def test_summarize_camel_case_response(self, test_client, fake_completion_client):
        fake_completion_client.response = "Short."

        response = await test_client.post(
            "/ai/summarize", json={"content": "A much longer text.", "maxLength": 20}
        )

        assert response.status_code == 200
        assert response.json() == {
            "summary": "Short.",
            "originalLength": len("A much longer text."),
            "summaryLength": len("Short."),
        }
        assert "approximately 20 words" in fake_completion_client.calls[0]["messages"][1].content

    @pytest.mark.asyncio
    async def test_generate_empty_provider_text(self, test_client, fake_completion_client):
        fake_completion_client.response = ""

        response = await test_client.post("/ai/generate", json={"prompt": "hi"})

        assert response.status_code == 200
        assert response.json() == {"text": "", "tokens": 0}

    @pytest.mark.asyncio
    async def test_generate_passes_camel_case_options(self, test_client, fake_completion_client):
        fake_completion_client.response = "abcdefghij"

        response = await test_client.post(
            "/ai/generate",
            json={"prompt": "hi", "context": "bg", "temperature": 0.1, "maxTokens": 50},
        )

        assert response.json() == {"text": "abcdefghij", "tokens": 3}
        call = fake_completion_client.calls[0]
        assert call["temperature"] == 0.1
        assert call["max_tokens"] == 50
        assert len(call["messages"]) == 3

    @pytest.mark.asyncio
    async def test_improve(self, test_client, fake_completion_client):
        fake_completion_client.response = "Better note."

        response = await test_client.post("/ai/improve", json={"content": "bad note"})

        assert response.status_code == 200
        assert response.json() == {"improvedContent": "Better note."}

    @pytest.mark.asyncio
    async def test_answer(self, test_client, fake_completion_client):
        fake_completion_client.response = "Tuesday."

        response = await test_client.post(
            "/ai/answer",
            json={"question": "When is the review?", "context": "The review is on Tuesday."},
        )

        assert response.status_code == 200
        assert response.json() == {"answer": "Tuesday."}

    @pytest.mark.asyncio
    async def test_response_carries_request_id_header(self, test_client):
        response = await test_client.post(
            "/ai/improve", json={"content": "x"}, headers={"X-Request-ID": "abc123"}
        )
        assert response.headers["X-Request-ID"] == "abc123"


class TestFailures:

    @pytest.mark.asyncio
    async def test_missing_credential_reports_configuration_message(self):
        app = create_app(completion_client=OpenAICompletionClient(api_key=""))
        transport = ASGITransport(app=app)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/ai/summarize", json={"content": "some text"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to summarize text",
            "details": "OPENAI_API_KEY is not configured in environment variables",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path, body, message",
        [
            ("/ai/summarize", {"content": "x"}, "Failed to summarize text"),
            ("/ai/generate", {"prompt": "x"}, "Failed to generate text"),
            ("/ai/improve", {"content": "x"}, "Failed to improve note"),
            ("/ai/answer", {"question": "q", "context": "c"}, "Failed to answer question"),
            ("/ai/tags", {"content": "x"}, "Failed to generate tags"),
        ],
    )
    async def test_provider_failure_is_500_with_details(
        self, test_client, fake_completion_client, path, body, message
    ):
        fake_completion_client.error = CompletionError(upstream="Request timed out.")

        response = await test_client.post(path, json=body)

        assert response.status_code == 500
        assert response.json() == {
            "error": message,
            "details": "Failed to get response from OpenAI: Request timed out.",
        }
        assert len(fake_completion_client.calls) == 1

    @pytest.mark.asyncio
    async def test_unexpected_exception_does_not_leak_type(
        self, test_client, fake_completion_client
    ):
        fake_completion_client.error = KeyError("choices")

        response = await test_client.post("/ai/generate", json={"prompt": "x"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to generate text"
        assert set(body) == {"error", "details"}
