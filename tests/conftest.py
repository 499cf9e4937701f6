"""
Forge API - Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   A template SQLite database with all tables is created once per
       session; every test that needs a database gets its own clone of it
       (forge_api.test_helpers.setup_db) and an app wired to that clone.

Fixture Hierarchy:
    Session-scoped:
    └── template_db_url: schema-only SQLite database used as clone source

    Function-scoped:
    ├── db_url: this test's private clone (dropped afterwards)
    ├── test_settings: Settings for the test environment pointing at db_url
    ├── app: application built by create_app(test_settings)
    ├── client: HTTPX AsyncClient talking to app
    ├── db_session: session on the same database the app uses
    ├── mock_db_session: AsyncMock session for pure unit tests
    └── register_and_login: coroutine that registers a user and returns a token
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any forge_api imports
_TEST_DIR = tempfile.mkdtemp(prefix="forge_api_test_")
os.environ["APP_ENVIRONMENT"] = "test"
os.environ["APP_DATABASE__URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/forge_api_test.db"
os.environ["APP_AUTH__JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["APP_AUTH__BCRYPT_ROUNDS"] = "4"
os.environ["APP_LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine

from forge_api.config import AuthConfig, DatabaseConfig, Environment, load_config
from forge_api.database import Base
from forge_api.main import create_app
from forge_api.models.note import Note  # noqa: F401
from forge_api.models.user import User  # noqa: F401
from forge_api.test_helpers import setup_db, teardown_db

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture(scope="session")
def template_db_url(tmp_path_factory) -> str:
    """Create the schema once in a SQLite file that each test clones."""
    path = Path(tmp_path_factory.mktemp("db")) / "forge_api_test.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest_asyncio.fixture
async def db_url(template_db_url):
    url = await setup_db(template_db_url)
    yield url
    await teardown_db(url)


@pytest.fixture
def test_settings(db_url):
    return load_config(
        Environment.TEST,
        database=DatabaseConfig(url=db_url),
        auth=AuthConfig(jwt_secret=TEST_JWT_SECRET, bcrypt_rounds=4),
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    application = create_app(test_settings)
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def db_session(app):
    """A session on the test's database, for seeding and inspecting rows."""
    async with app.state.database.session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def register_and_login(client):
    """
    Register a user through the API and return a fresh token.

    Usage:
        token = await register_and_login("alice", "s3cret")
    """

    async def _register_and_login(name: str = "alice", password: str = "s3cret") -> str:
        response = await client.post("/register", json={"name": name, "password": password})
        assert response.status_code == 200, response.text
        response = await client.post("/login", json={"name": name, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["data"]["token"]

    return _register_and_login
