"""
Shared pytest fixtures.

Every test gets its own SQLite file under tmp_path, so tests never share rows.
"""
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from minakami.core.config import settings
from minakami.db.connection import DatabaseConnection
from minakami.db.facade import DatabaseService
from minakami.db.schema import SchemaManager
from minakami.services.performance import QueryTimer


@pytest.fixture()
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'minakami_test.db'}"


@pytest_asyncio.fixture()
async def connection(db_url):
    conn = DatabaseConnection(db_url)
    await conn.initialize()
    yield conn
    await conn.dispose()


@pytest_asyncio.fixture()
async def schema_ready(connection):
    """A connection with tables, migrations and indexes in place."""
    await SchemaManager(connection).initialize_database()
    return connection


@pytest.fixture()
def timer():
    return QueryTimer(slow_query_threshold_ms=1000.0, max_stored_metrics=50)


@pytest_asyncio.fixture()
async def db(db_url, timer):
    service = DatabaseService(DatabaseConnection(db_url), timer)
    await service.initialize()
    yield service
    await service.close()


@pytest.fixture()
def client(db_url, monkeypatch):
    from minakami.main import app

    monkeypatch.setattr(settings, "DATABASE_URL", db_url)
    with TestClient(app) as c:
        yield c
