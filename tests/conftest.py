"""
Pytest configuration and fixtures.

Tests run against an in-memory SQLite database so no PostgreSQL is required.
Tables are created before and dropped after every test that uses ``db``.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import TEST_GOOGLE_CLIENT_ID, TEST_SECRET_KEY

# Force test settings when pytest runs; don't inherit from .env
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"  # minimum bcrypt cost keeps hashing fast
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)
os.environ.setdefault("GOOGLE_CLIENT_ID", TEST_GOOGLE_CLIENT_ID)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def db() -> Session:
    """Database session on a fresh schema. Tables are dropped after each test."""
    import app.models  # noqa: F401
    from app.db.session import Base, SessionLocal, engine

    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def client_with_db(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session (for integration tests)."""
    from app.db.session import get_db
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_user(db: Session):
    """Factory creating a password user directly in the test database."""
    from app.services.auth import create_user

    def _make(email: str, password: str, name: str | None = None):
        return create_user(db, email, password, name)

    return _make


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a freshly issued token for a user."""
    from app.services.auth import issue_token

    def _headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _headers
