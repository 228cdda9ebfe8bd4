import os

# Settings are read at import time, so the environment is fixed up first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_DISABLED"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bnusa import models  # noqa: F401
from bnusa.api.deps import get_db
from bnusa.db.base import Base
from bnusa.main import app
from bnusa.models.book import Book
from bnusa.services.auth import AuthService
from bnusa.services.rate_limit import book_update_limiter

# In-memory SQLite shared by every connection of the test session
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    db_session = TestingSessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session):
    """Create a test client with the test database."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    book_update_limiter.reset()
    yield
    book_update_limiter.reset()


def make_auth_headers(uid: str, email: str | None = None, name: str | None = None):
    token = AuthService.create_access_token(uid, email=email, name=name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """The writer who owns the books in most tests."""
    return make_auth_headers("writer-uid", email="writer@example.com", name="Writer One")


@pytest.fixture
def reader_headers():
    return make_auth_headers("reader-uid", email="reader@example.com", name="Reader Two")


@pytest.fixture
def other_headers():
    return make_auth_headers("other-uid", email="other@example.com")


@pytest.fixture
def create_book(client: TestClient, auth_headers):
    """Create a draft book through the API and return its JSON."""
    def _create(headers=None, **overrides):
        payload = {
            "title": "The Mountain Road",
            "description": "A story about the road home",
            "genre": "Novel",
        }
        payload.update(overrides)
        response = client.post(
            "/api/v1/books", json=payload, headers=headers or auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["book"]

    return _create


@pytest.fixture
def create_chapter(client: TestClient, auth_headers):
    def _create(slug, headers=None, **overrides):
        payload = {"title": "Chapter", "content": "<p>Once upon a time</p>"}
        payload.update(overrides)
        response = client.post(
            f"/api/v1/books/{slug}/chapters",
            json=payload,
            headers=headers or auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["chapter"]

    return _create


@pytest.fixture
def publish(db: Session):
    """Mark a book published the way the review tooling does."""
    def _publish(slug: str):
        book = db.query(Book).filter(Book.slug == slug).one()
        book.is_draft = False
        book.is_pending_review = False
        book.is_published = True
        db.commit()

    return _publish


@pytest.fixture
def published_book(create_book, create_chapter, publish):
    """A published book with one public chapter."""
    book = create_book()
    create_chapter(book["slug"], isDraft=False)
    publish(book["slug"])
    return book


@pytest.fixture
def make_headers():
    """Factory for bearer headers of arbitrary users."""
    return make_auth_headers
