"""
Fixtures compartidas: Settings de prueba, base Mongo en memoria
(mongomock-motor) y cliente HTTP async contra la app ASGI.
"""
import os

# Antes de importar la app: `app.main` construye la app a nivel de módulo
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-secret-not-for-production")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from app.core.config import Settings
from app.infrastructure.db.bootstrap import ensure_indexes
from app.main import create_app
from app.repositories.note_repo import NoteRepository
from app.repositories.user_repo import UserRepository
from app.services.note_service import NoteService
from app.services.token_service import TokenService

TEST_SECRET = "test-secret-not-for-production"


@pytest.fixture
def settings() -> Settings:
    return Settings(access_token_secret=TEST_SECRET, log_level="WARNING")


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(settings)


@pytest_asyncio.fixture
async def database():
    db = AsyncMongoMockClient()["notes_test"]
    await ensure_indexes(db)
    return db


@pytest.fixture
def note_service(database) -> NoteService:
    return NoteService(NoteRepository(database))


@pytest.fixture
def user_repo(database) -> UserRepository:
    return UserRepository(database)


@pytest.fixture
def app(settings, database):
    return create_app(settings, database=database)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def register(client, email: str, full_name: str = "Test User", password: str = "p4ssw0rd") -> str:
    """Crea la cuenta y devuelve el access token."""
    r = await client.post("/create-account", json={"fullName": full_name, "email": email, "password": password})
    assert r.status_code == 200, r.text
    assert r.json()["error"] is False
    return r.json()["accessToken"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
