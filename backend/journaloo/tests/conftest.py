"""
Shared test fixtures.

Runs the API against an in-memory SQLite database, an in-memory image store
and a recording mailer.
"""
import os

# Set test environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("S3_BUCKET", "")
os.environ.setdefault("MAIL_API_KEY", "")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from journaloo.main import app
from journaloo.db.base import Base
from journaloo.db.session import get_db
from journaloo.services.mail_service import InMemoryMailer, get_mailer
from journaloo.services.storage_service import InMemoryStorageClient, get_storage_client
import journaloo.models  # noqa: F401

TEST_SECRET = os.environ["JWT_SECRET"]
DEFAULT_PASSWORD = "testpassword123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return InMemoryStorageClient()


@pytest.fixture
def mailer():
    return InMemoryMailer()


@pytest.fixture
def client(engine, storage, mailer):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_client] = lambda: storage
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup(client, username, email=None, password=DEFAULT_PASSWORD):
    """Create a user through the API and return its access token."""
    response = client.post(
        "/user",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password
        }
    )
    assert response.status_code == 201, response.text
    return response.json()["access_token"]


def auth(token):
    return {"Authorization": token}


@pytest.fixture
def user_token(client):
    return signup(client, "jondoe", "jon@doe.com")


@pytest.fixture
def other_token(client):
    return signup(client, "janedoe", "jane@doe.com")


def create_journey(client, token, title="Trip"):
    response = client.post("/journey", json={"title": title}, headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()


def create_entry(client, token, journey_id, **fields):
    response = client.post(
        "/entry", json={"journey_id": journey_id, **fields}, headers=auth(token)
    )
    assert response.status_code == 201, response.text
    return response.json()


def decode(token):
    return jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
