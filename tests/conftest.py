"""Shared fixtures: temporary SQLite database, settings and API client."""

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from voxstory.api.main import create_app
from voxstory.core.config import Settings
from voxstory.models.database import Database

TEST_HASH_ROUNDS = 4


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway database with cheap bcrypt."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        secret_key="test-secret-key",
        password_hash_rounds=TEST_HASH_ROUNDS,
        gemini_api_key="test-gemini-key",
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    db = Database(settings.async_database_url)
    await db.create_all()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    async with database.session_factory() as s:
        yield s


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    """Test client with the application lifespan running."""
    with TestClient(app) as c:
        yield c


def signup(client: TestClient, email: str, password: str = "pw123") -> dict:
    """Start a fresh session as a newly registered user."""
    client.cookies.clear()
    response = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["user"]


def login(client: TestClient, email: str, password: str = "pw123") -> dict:
    """Start a fresh session as an existing user."""
    client.cookies.clear()
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["user"]


def project_payload(project_id: str, **overrides) -> dict:
    payload = {
        "id": project_id,
        "title": "The Lantern Keeper",
        "content": "Once upon a time...",
        "audio_data": "UklGRiQAAABXQVZF",
        "image_data": None,
        "genre": "Fantasy",
    }
    payload.update(overrides)
    return payload
