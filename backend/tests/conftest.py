"""
Portfolio API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the whole suite.
How:   The environment is pointed at a throwaway SQLite database and
       storage directory BEFORE any `app` module is imported, so the
       engine and FileService singletons pick them up.

Fixtures:
    ├── db_tables:          Creates the schema, drops it and disposes the pool after
    ├── db_session:         A real AsyncSession on the test database
    ├── mock_db_session:    AsyncMock session for failure paths
    ├── test_client:        HTTPX AsyncClient talking to the app over ASGI
    ├── sample_image_bytes: Minimal JPEG bytes for upload tests
    └── sample_png_bytes:   Minimal PNG bytes for upload tests
"""

import os
import shutil
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="portfolio_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["STORAGE_ROOT"] = os.path.join(_TEST_DIR, "images")
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.database import Base, async_session_factory, create_tables, engine  # noqa: E402
from app.models.info import Info  # noqa: E402,F401
from app.models.photo import Photo  # noqa: E402,F401
from app.models.piece import Piece  # noqa: E402,F401
from app.services.file_service import file_service  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_TEST_DIR, ignore_errors=True)


@pytest_asyncio.fixture
async def db_tables():
    """Fresh schema per test; the pool is disposed so no connection outlives its loop."""
    await create_tables()
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_tables):
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        with pytest.raises(DatabaseError):
            await piece_service.list_all(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def clean_storage():
    """Empties the file store after the test."""
    yield file_service.storage_root
    for path in file_service.storage_root.iterdir():
        if path.is_file():
            path.unlink()


@pytest_asyncio.fixture
async def test_client(db_tables, clean_storage):
    """
    Async HTTP client for endpoint tests.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: Start of Image (FFD8) + JFIF marker + End of Image (FFD9)."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_png_bytes():
    """PNG signature + IHDR chunk for a 1x1 RGBA image, enough for libmagic."""
    return (
        b'\x89PNG\r\n\x1a\n'
        b'\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89'
        b'\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N'
        b'\x00\x00\x00\x00IEND\xaeB`\x82'
    )
