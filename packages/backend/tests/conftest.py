"""Test fixtures — in-memory database and an app per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI without a server:

1. Each test gets a fresh in-memory SQLite database (aiosqlite). StaticPool
   keeps the single connection alive, so every session sees the same data.
2. The schema comes straight from the ORM metadata (create_all).
3. Each test builds its own app via create_app(Settings(...)) and overrides
   get_db, so nothing leaks between tests and real commits are fine.

Auth is NOT mocked: tests sign up and log in through the real endpoints
and send the returned token back as a Bearer header.
"""

import os

# The module-level app in sentinent.main is built at import time and
# refuses to start without a secret and an origin list.
os.environ.setdefault("SENTINENT_JWT_SECRET", "test-secret-0123456789abcdef0123456789abcdef")
os.environ.setdefault("SENTINENT_CORS_ALLOWED_ORIGINS", "http://localhost:4200")
os.environ.setdefault("SENTINENT_BCRYPT_ROUNDS", "4")
os.environ.setdefault("SENTINENT_DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from sentinent.config import Settings  # noqa: E402
from sentinent.db.engine import get_db  # noqa: E402
from sentinent.db.models import Base  # noqa: E402
from sentinent.main import create_app  # noqa: E402

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"
TEST_ORIGIN = "http://localhost:4200"
TEST_PASSWORD = "correct-horse-battery"


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite://",
        "jwt_secret": TEST_SECRET,
        "cors_allowed_origins": TEST_ORIGIN,
        "bcrypt_rounds": 4,
        "environment": "development",
    }
    values.update(overrides)
    return Settings(**values)


def parse_ts(value: str) -> datetime:
    """Parse an API timestamp, ignoring the offset.

    SQLite hands back naive datetimes where Postgres hands back aware
    ones; both are UTC.
    """
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Direct session for asserting on rows the API wrote."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def build_app(session_factory):
    """Factory: an app wired to the test database, with optional settings overrides."""

    def _build(**overrides):
        app = create_app(make_settings(**overrides))

        async def override_get_db():
            async with session_factory() as session:
                yield session

        app.dependency_overrides[get_db] = override_get_db
        return app

    return _build


@pytest.fixture()
def app(build_app):
    return build_app()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def register(client):
    """Sign up + log in a user, return their id, email, token and auth headers.

    Learn: Login also sets the token cookie on the client's jar. It is
    cleared here so every later request authenticates only with the
    headers the test passes explicitly, and two users never mix.
    """

    async def _register(email: str, password: str = TEST_PASSWORD) -> dict:
        r = await client.post("/api/signup", json={"email": email, "password": password})
        assert r.status_code == 201, r.text
        user = r.json()

        r = await client.post("/api/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        token = r.json()["token"]
        client.cookies.clear()

        return {
            "id": user["id"],
            "email": user["email"],
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _register


@pytest.fixture()
def create_workspace(client):
    async def _create(owner: dict, name: str = "Platform") -> dict:
        r = await client.post(
            "/api/workspaces", json={"name": name}, headers=owner["headers"]
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _create
