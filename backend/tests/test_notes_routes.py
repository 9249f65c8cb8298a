"""
NoteFlow Backend — Notes and Sign-in Endpoint Tests
=====================================================

What:  HTTP-level tests for /notes and /auth/signin.
How:   get_db_session is overridden with the mock session, so the real
       services run against canned query results.
"""

from uuid import uuid4

import pytest

from noteflow.database import get_db_session


@pytest.fixture
def db_override(app, mock_db_session):
    app.dependency_overrides[get_db_session] = lambda: mock_db_session
    yield mock_db_session
    app.dependency_overrides.clear()


class TestNotesEndpoints:

    @pytest.mark.asyncio
    async def test_list_notes(self, test_client, db_override, sample_note):
        db_override.execute.return_value.scalars.return_value.all.return_value = [sample_note]

        response = await test_client.get("/notes")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["id"] == str(sample_note.id)
        assert body[0]["userId"] == str(sample_note.user_id)
        assert body[0]["tags"] == ["budget"]
        assert body[0]["user"] == {"name": "Demo User", "email": "demo@noteflow.com"}
        assert "createdAt" in body[0] and "updatedAt" in body[0]
        assert "password" not in body[0]["user"]

    @pytest.mark.asyncio
    async def test_create_note(self, test_client, db_override, sample_user):
        db_override.get.return_value = sample_user

        response = await test_client.post(
            "/notes",
            json={"title": "Ideas", "content": "Ship it", "userId": str(sample_user.id)},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Ideas"
        assert body["tags"] == []
        assert body["summary"] is None
        assert body["user"]["email"] == sample_user.email

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"content": "c"}, {"title": "", "content": "c"}, {"title": "t"}])
    async def test_create_note_requires_title_and_content(self, test_client, db_override, body):
        response = await test_client.post("/notes", json={**body, "userId": str(uuid4())})

        assert response.status_code == 400
        assert response.json() == {"error": "Title and content are required"}

    @pytest.mark.asyncio
    async def test_create_note_requires_user(self, test_client, db_override):
        response = await test_client.post("/notes", json={"title": "t", "content": "c"})

        assert response.status_code == 401
        assert response.json() == {"error": "User ID is required. Please sign in."}

    @pytest.mark.asyncio
    async def test_create_note_unknown_user(self, test_client, db_override):
        db_override.get.return_value = None

        response = await test_client.post(
            "/notes", json={"title": "t", "content": "c", "userId": str(uuid4())}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User not found. Please sign in again."}

    @pytest.mark.asyncio
    async def test_get_missing_note(self, test_client, db_override):
        db_override.execute.return_value.scalar_one_or_none.return_value = None

        response = await test_client.get(f"/notes/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Note not found"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    async def test_malformed_note_id_is_not_found(self, test_client, db_override, method):
        kwargs = {"json": {"title": "t"}} if method == "PUT" else {}

        response = await test_client.request(method, "/notes/not-a-uuid", **kwargs)

        assert response.status_code == 404
        assert response.json() == {"error": "Note not found"}
        db_override.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_note_long_title(self, test_client, db_override, sample_user):
        db_override.get.return_value = sample_user
        title = "x" * 300

        response = await test_client.post(
            "/notes",
            json={"title": title, "content": "c", "userId": str(sample_user.id)},
        )

        assert response.status_code == 201
        assert response.json()["title"] == title

    @pytest.mark.asyncio
    async def test_update_saves_summary_and_tags(self, test_client, db_override, sample_note):
        db_override.execute.return_value.scalar_one_or_none.return_value = sample_note

        response = await test_client.put(
            f"/notes/{sample_note.id}",
            json={"summary": "Budget recap", "tags": ["budget", "Q3"]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["summary"] == "Budget recap"
        assert body["tags"] == ["budget", "Q3"]
        assert body["title"] == "Q3 planning"

    @pytest.mark.asyncio
    async def test_update_null_summary_clears_it(self, test_client, db_override, sample_note):
        sample_note.summary = "stale"
        db_override.execute.return_value.scalar_one_or_none.return_value = sample_note

        response = await test_client.put(f"/notes/{sample_note.id}", json={"summary": None})

        assert response.status_code == 200
        assert response.json()["summary"] is None

    @pytest.mark.asyncio
    async def test_delete_note(self, test_client, db_override, sample_note):
        db_override.execute.return_value.scalar_one_or_none.return_value = sample_note

        response = await test_client.delete(f"/notes/{sample_note.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted successfully"}

    @pytest.mark.asyncio
    async def test_database_failure_is_generic_500(self, test_client, db_override):
        db_override.execute.side_effect = RuntimeError("relation notes does not exist")

        response = await test_client.get("/notes")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch notes"}


class TestSignInEndpoint:

    @pytest.mark.asyncio
    async def test_sign_in_success(self, test_client, db_override, sample_user):
        db_override.execute.return_value.scalar_one_or_none.return_value = sample_user

        response = await test_client.post(
            "/auth/signin", json={"email": sample_user.email, "password": "correct horse"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "Signed in successfully",
            "user": {"id": str(sample_user.id), "name": "Demo User", "email": sample_user.email},
        }

    @pytest.mark.asyncio
    async def test_sign_in_missing_fields(self, test_client, db_override):
        response = await test_client.post("/auth/signin", json={"email": "a@b.c"})

        assert response.status_code == 400
        assert response.json() == {"error": "Email and password are required"}

    @pytest.mark.asyncio
    async def test_sign_in_bad_password(self, test_client, db_override, sample_user):
        db_override.execute.return_value.scalar_one_or_none.return_value = sample_user

        response = await test_client.post(
            "/auth/signin", json={"email": sample_user.email, "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}
