"""
pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database wired into the app
through the ``get_db`` dependency.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base, get_db
from apps.parts.models import Part  # noqa: F401  registers the table on Base
from main import app


@pytest.fixture
def engine():
    """In-memory database shared by every connection of the test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def client(session_factory):
    """Test client whose requests run against the in-memory database."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_part(client):
    """POST a part and return the response body."""
    def _create(**fields):
        body = {"name": "Hex Nut M3"}
        body.update(fields)
        response = client.post("/api/parts", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
