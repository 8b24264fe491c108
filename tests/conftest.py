"""
Shared fixtures.

Environment is set before the application is imported so settings load
without a .env file. Each test gets a fresh database.
"""

import os
import tempfile

_APP_DB_DIR = tempfile.mkdtemp(prefix="ledger-service-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_APP_DB_DIR, 'app.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from ledger_service.main import app
from ledger_service.database import Base, build_engine, get_db
from ledger_service.services.users import register_user


@pytest.fixture
def engine(tmp_path):
    url = os.environ.get("TEST_DATABASE_URL", f"sqlite:///{tmp_path / 'ledger.db'}")
    engine = build_engine(url, echo=False)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """A single session for service-level tests."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """API client bound to the per-test database."""

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
def make_user(session_factory):
    """
    Register a user in its own short-lived session.

    Returns (user_id, first_account_number).
    """
    counter = {"n": 0}

    def _make_user(name="Test User", email=None, password="password123"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        with session_factory() as session:
            user, account = register_user(session, name, email, password)
            return user.id, account.account_number

    return _make_user


@pytest.fixture
def signup(client):
    """
    Register and log in through the API.

    Returns (auth headers, first account number).
    """

    def _signup(name="Test User", email="test@example.com", password="password123"):
        response = client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        account_number = response.json()["account_number"]

        response = client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        token = response.json()["access_token"]
        return {"Authorization": f"Bearer {token}"}, account_number

    return _signup
