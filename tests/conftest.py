"""Shared pytest fixtures for sanitizer and API tests."""

import os
import tempfile

import pytest

# Settings are read once at import, so the audit log must be redirected
# before any Security module is loaded.
os.environ.setdefault("SANITIZER_LOG_FILE", os.path.join(tempfile.mkdtemp(prefix="vetconnect-logs-"), "sanitizer.log"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.main import create_app  # noqa: E402


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    """TestClient over a fresh app whose sessions use the in-memory engine."""
    app = create_app(bind=engine)
    testing_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = testing_session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user(client):
    """A created user profile as returned by the API."""
    response = client.post(
        "/api/users",
        json={"email": "vet@example.com", "first_name": "Jane", "last_name": "Doe"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def multi_vector():
    return "<script>bad</script><img src=x onerror=alert(1)><iframe src=evil>"
