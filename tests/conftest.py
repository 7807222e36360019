"""
Restaurants API - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session (service unit tests, no real DB)
    ├── database_url:    SQLite file URL inside the test's tmp_path
    ├── database:        Connected Database handle on that file
    ├── test_client:     HTTPX AsyncClient bound to an app serving `database`
    └── sample_restaurant_data: payload for create requests
"""

import os

# Override settings BEFORE any restaurants_api import reads them
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_restaurants.db"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from restaurants_api.database import Database


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
            result = await restaurant_service.get_restaurant(mock_db_session, "abc")
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
def database_url(tmp_path):
    """A fresh SQLite database file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'restaurants.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    """Connected Database handle; schema is created on connect."""
    db = Database(database_url, create_schema=True)
    await db.connect()
    yield db
    await db.disconnect()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to a fresh app over ASGITransport.

    ASGITransport does not run the lifespan, so the app serves exactly the
    `database` fixture's handle.
    """
    from restaurants_api.main import create_app

    app = create_app(database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_restaurant_data():
    return {
        "name": "Morris Park Bake Shop",
        "borough": "Bronx",
        "cuisine": "Bakery",
        "address": {
            "building": "1007",
            "coord": [-73.856077, 40.848447],
            "street": "Morris Park Ave",
            "zipcode": "10462",
        },
        "grades": [
            {"date": "2014-03-03T00:00:00Z", "grade": "A", "score": 2},
            {"date": "2013-09-11T00:00:00Z", "grade": "A", "score": 6},
        ],
    }
