"""
Shared fixtures: in-memory SQLite database and API client.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.db.base import Base
from app.db.session import get_db
from app.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Fresh schema for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Test client bound to the test database."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Create a registration through the API and return its id."""
    def _register(name, travel_plan=None, registration_type="Alumni", **fields):
        payload = {
            "registration_type": registration_type,
            "name": name,
            "email": fields.pop("email", f"{name.lower().replace(' ', '.')}@example.com"),
            "contact_number": fields.pop("contact_number", "9876543210"),
            "travel_plan": travel_plan or {},
        }
        payload.update(fields)
        response = client.post("/api/registrations", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _register
