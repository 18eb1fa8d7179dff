"""
NoteCache — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test gets its own storage root, so tests never see each other's
       notes and never touch ./notes.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── temp_storage: Empty storage root under pytest's tmp_path
    ├── settings: Settings bound to temp_storage (no static dir)
    ├── note_store: NoteStore over temp_storage
    ├── app: FastAPI app built from settings
    └── test_client: HTTPX AsyncClient talking to app over ASGI
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Keep log output quiet and keep stray env config out of the tests
os.environ["LOG_LEVEL"] = "WARNING"
for _var in ("CACHE", "STORAGE_ROOT", "HOST", "PORT", "STATIC_DIR"):
    os.environ.pop(_var, None)

from notecache.config import Settings  # noqa: E402
from notecache.main import create_app  # noqa: E402
from notecache.services.note_store import NoteStore  # noqa: E402


@pytest.fixture
def temp_storage(tmp_path):
    """A fresh, empty storage root for each test."""
    storage_dir = tmp_path / "notes"
    storage_dir.mkdir()
    return storage_dir


@pytest.fixture
def settings(temp_storage, tmp_path):
    """Settings bound to the temporary storage root."""
    return Settings(
        storage_root=str(temp_storage),
        static_dir=str(tmp_path / "no-static"),
    )


@pytest.fixture
def note_store(temp_storage):
    return NoteStore(temp_storage)


@pytest.fixture
def app(settings):
    return create_app(settings)


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
