"""
Pytest configuration and fixtures for testing.

Every test gets its own SQLite file under tmp_path and a NullPool engine, so
connections are opened on whichever event loop runs the test (the pytest-asyncio
loop for service tests, the TestClient portal loop for API tests).
"""

import os

# Settings are read at import time; keep the app off the default staff.db
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import app.main as main_module
from app.database import Base, get_db
from app.main import app
from app.services.cache import StaffCache


@pytest.fixture
def test_engine(tmp_path):
    return create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(bind=test_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db_session(test_engine, session_factory):
    """Fresh schema and session for service-level tests."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with session_factory() as session:
        yield session
    await test_engine.dispose()


@pytest.fixture
def cache():
    return StaffCache()


@pytest.fixture
def client(monkeypatch, test_engine, session_factory):
    """
    FastAPI test client bound to the per-test database.
    Startup creates the tables on the test engine and a fresh cache.
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    monkeypatch.setattr(main_module, "engine", test_engine)
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_user_data():
    """Sample user payload, as the admin form posts it"""
    return {
        "firstName": "Ana",
        "lastName": "Lopez",
        "rolePosition": "Operations",
        "mavId": 1001234567,
        "status": "Active",
        "studentEmail": "ana.lopez@mavs.example.edu",
        "shirtSize": "M",
        "dateHired": "2023-03-15T00:00:00Z",
        "hourlyPayRate": 15,
        "hasSsn": True,
    }


@pytest.fixture
def sample_evaluation_data():
    """Sample evaluation payload; userId is filled in by the test"""
    return {
        "evaluationDate": "2024-05-01T00:00:00Z",
        "cycleLabel": "Spring 2024",
        "evaluatorName": "Sam Rivera",
        "evaluatorEmail": "sam.rivera@example.edu",
        "items": [
            {"course": "CIA: Opening", "category": "CIA", "score": 8, "selfScore": 7},
            {"course": "CIA: Closing", "category": "CIA", "score": 6},
            {"course": "Safety walk", "category": "", "score": None},
        ],
        "employeeComments": "Happy with the semester.",
    }
