"""
NoteCache — HTTP Endpoint Tests
================================

What:  Tests for the HTTP surface: status codes, bodies, and error format.
How:   HTTPX AsyncClient over ASGITransport against an app built around a
       temporary storage root (see conftest.py).
"""

from unittest.mock import patch

import pytest

from notecache.main import create_app
from notecache.config import Settings

TEXT = {"Content-Type": "text/plain"}


class TestNoteLifecycle:

    @pytest.mark.asyncio
    async def test_write_read_update_delete(self, test_client):
        response = await test_client.post("/write", data={"note_name": "x", "note": "abc"})
        assert response.status_code == 201

        response = await test_client.get("/notes/x")
        assert response.status_code == 200
        assert response.text == "abc"
        assert response.headers["content-type"].startswith("text/plain")

        response = await test_client.put("/notes/x", content="xyz", headers=TEXT)
        assert response.status_code == 200

        response = await test_client.get("/notes/x")
        assert response.status_code == 200
        assert response.text == "xyz"

        response = await test_client.delete("/notes/x")
        assert response.status_code == 200

        response = await test_client.get("/notes/x")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_write_accepts_multipart_form(self, test_client, temp_storage):
        response = await test_client.post(
            "/write",
            data={"note_name": "multi", "note": "part"},
            files={"unused": ("unused.txt", b"", "text/plain")},
        )
        assert response.status_code == 201
        assert (temp_storage / "multi.txt").read_text(encoding="utf-8") == "part"


class TestWrite:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data",
        [{}, {"note_name": "only-name"}, {"note": "only-text"}, {"note_name": "", "note": "x"}],
    )
    async def test_missing_field_is_400(self, test_client, temp_storage, data):
        response = await test_client.post("/write", data=data)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert list(temp_storage.iterdir()) == []

    @pytest.mark.asyncio
    async def test_existing_name_is_400_and_keeps_content(self, test_client):
        await test_client.post("/write", data={"note_name": "dup", "note": "first"})

        response = await test_client.post("/write", data={"note_name": "dup", "note": "second"})

        assert response.status_code == 400
        assert response.json()["error"] == "already_exists"
        assert (await test_client.get("/notes/dup")).text == "first"

    @pytest.mark.asyncio
    async def test_json_body_creates_note(self, test_client, temp_storage):
        response = await test_client.post("/write", json={"note_name": "j", "note": "son\n"})

        assert response.status_code == 201
        assert (temp_storage / "j.txt").read_text(encoding="utf-8") == "son\n"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [b"{not json", b'["a", "b"]', b'{"note_name": "n", "note": 42}'],
    )
    async def test_bad_json_body_is_400(self, test_client, temp_storage, body):
        response = await test_client.post(
            "/write", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert list(temp_storage.iterdir()) == []

    @pytest.mark.asyncio
    async def test_json_body_missing_field_is_400(self, test_client):
        response = await test_client.post("/write", json={"note_name": "n"})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_write_failure_is_500_without_details(self, test_client):
        with patch(
            "notecache.services.note_store.aiofiles.open",
            side_effect=PermissionError("Permission denied: '/secret/path/x.txt'"),
        ):
            response = await test_client.post("/write", data={"note_name": "x", "note": "abc"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "/secret/path" not in response.text


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_unknown_is_404_and_creates_nothing(self, test_client, temp_storage):
        response = await test_client.put("/notes/ghost", content="boo", headers=TEXT)

        assert response.status_code == 404
        assert not (temp_storage / "ghost.txt").exists()

    @pytest.mark.asyncio
    async def test_update_non_text_body_is_400(self, test_client):
        await test_client.post("/write", data={"note_name": "n", "note": "orig"})

        response = await test_client.put("/notes/n", json={"text": "nope"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert (await test_client.get("/notes/n")).text == "orig"

    @pytest.mark.asyncio
    async def test_update_undecodable_body_is_400(self, test_client):
        await test_client.post("/write", data={"note_name": "n", "note": "orig"})

        response = await test_client.put(
            "/notes/n",
            content=b"\xff\xfe\xfa",
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_honours_declared_charset(self, test_client):
        await test_client.post("/write", data={"note_name": "n", "note": "orig"})

        response = await test_client.put(
            "/notes/n",
            content="café".encode("latin-1"),
            headers={"Content-Type": "text/plain; charset=latin-1"},
        )

        assert response.status_code == 200
        assert (await test_client.get("/notes/n")).text == "café"

    @pytest.mark.asyncio
    async def test_unknown_name_wins_over_bad_body(self, test_client):
        response = await test_client.put("/notes/ghost", json={"text": "nope"})
        assert response.status_code == 404


class TestListAndDelete:

    @pytest.mark.asyncio
    async def test_list_notes(self, test_client):
        await test_client.post("/write", data={"note_name": "a", "note": "hello"})
        await test_client.post("/write", data={"note_name": "b", "note": "world"})

        response = await test_client.get("/notes")

        assert response.status_code == 200
        items = {(item["name"], item["text"]) for item in response.json()}
        assert items == {("a", "hello"), ("b", "world")}

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_delete_unknown_is_404(self, test_client):
        response = await test_client.delete("/notes/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestOverlongNames:
    """A name too long to be a file name is treated like any other absent note."""

    LONG = "a" * 300

    @pytest.mark.asyncio
    async def test_get_is_404(self, test_client):
        response = await test_client.get(f"/notes/{self.LONG}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_delete_is_404(self, test_client):
        response = await test_client.delete(f"/notes/{self.LONG}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_is_404(self, test_client):
        response = await test_client.put(f"/notes/{self.LONG}", content="text", headers=TEXT)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_write_is_400(self, test_client, temp_storage):
        response = await test_client.post("/write", data={"note_name": self.LONG, "note": "x"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert list(temp_storage.iterdir()) == []


class TestAmbient:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/notes/missing", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.json()["request_id"] == "abc123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("supplied", ["x" * 65, "has space", "ünïcode"])
    async def test_unusable_request_id_is_replaced(self, test_client, supplied):
        response = await test_client.get(
            "/notes/missing", headers={"X-Request-ID": supplied.encode("utf-8")}
        )

        rid = response.headers["X-Request-ID"]
        assert rid != supplied
        assert len(rid) == 8
        assert response.json()["request_id"] == rid

    @pytest.mark.asyncio
    async def test_access_log_names_the_note(self, test_client, caplog):
        with caplog.at_level("INFO", logger="notecache.access"):
            await test_client.get("/notes/groceries")

        records = [r for r in caplog.records if r.name == "notecache.access"]
        assert len(records) == 1
        assert records[0].note == "groceries"
        assert records[0].status == 404
        assert "note='groceries'" in records[0].getMessage()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/docs", "/openapi.json"])
    async def test_health_and_docs_are_not_access_logged(self, test_client, caplog, path):
        with caplog.at_level("INFO", logger="notecache.access"):
            response = await test_client.get(path)

        assert response.status_code == 200
        assert not [r for r in caplog.records if r.name == "notecache.access"]

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        await test_client.post("/write", data={"note_name": "a", "note": "hello"})

        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["storage"] == "writable"
        assert body["notes"] == 1

    @pytest.mark.asyncio
    async def test_static_dir_is_served_at_root(self, tmp_path):
        from httpx import AsyncClient, ASGITransport

        public = tmp_path / "public"
        public.mkdir()
        (public / "index.html").write_text("<h1>notes</h1>", encoding="utf-8")
        app = create_app(Settings(storage_root=str(tmp_path / "store"), static_dir=str(public)))

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            index = await client.get("/")
            listing = await client.get("/notes")

        assert index.status_code == 200
        assert "<h1>notes</h1>" in index.text
        assert listing.status_code == 200
        assert listing.json() == []
