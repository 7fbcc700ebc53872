"""
Shared fixtures for Folio backend integration tests.

By default the suite runs against a throwaway aiosqlite file; set
TEST_DATABASE_URL to run it against PostgreSQL instead.  Tables are created
with create_all before every test and emptied afterwards.  Uploaded files go
to a temporary directory.
"""
from __future__ import annotations

import io
import os
import tempfile
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

# Override settings *before* any app module is imported, so that
# settings.DATABASE_URL and the upload directory point at test locations.
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_folio.db")
TEST_UPLOAD_DIR = tempfile.mkdtemp(prefix="folio-uploads-")
ADMIN_KEY = "test-admin-key"

os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["UPLOAD_DIR"] = TEST_UPLOAD_DIR
os.environ["ADMIN_API_KEY"] = ADMIN_KEY

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    # SQLite ignores ON DELETE rules unless asked per connection.
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ---------------------------------------------------------------------------
# Per-test fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """
    Engine + session factory for one test.  All tables are created up front
    and every row is deleted afterwards so each test starts clean.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    # Children first
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(table.delete())

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """A session for calling services directly."""
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@pytest_asyncio.fixture
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx AsyncClient wired to the FastAPI app.  Each request gets its own
    session from the test engine, committed or rolled back like get_db.
    """

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ADMIN_HEADERS = {"X-Admin-Key": ADMIN_KEY}


def png_bytes(size=(4, 4), color=(200, 40, 40)) -> bytes:
    """A tiny, valid PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


async def create_project_type(client: AsyncClient, name: str = "Artificial Intelligence", **extra) -> dict:
    resp = await client.post("/api/admin/project-types", json={"name": name, **extra}, headers=ADMIN_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_project(client: AsyncClient, project_type_id: int, title: str = "Vision Pipeline", **extra) -> dict:
    body = {
        "title": title,
        "short_description": "A short description",
        "project_type_id": project_type_id,
        **extra,
    }
    resp = await client.post("/api/admin/projects", json=body, headers=ADMIN_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_post(client: AsyncClient, title: str = "Hello World", **extra) -> dict:
    body = {"title": title, "content": "<p>Some words for the post body.</p>", **extra}
    resp = await client.post("/api/admin/blog-posts", json=body, headers=ADMIN_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()
