"""
Pytest configuration and fixtures for the blog API tests.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blog_api.core.security import create_access_token
from blog_api.crud import crud_role, crud_user
from blog_api.database import Base, get_db
from blog_api.init_db import init_db
from blog_api.main import app
from blog_api.services.media_storage import MediaStorageError, get_media_storage
from blog_api.services.youtube import YouTubeClient, get_youtube_client

# Use in-memory SQLite for tests with shared connection
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_test_db():
    """One session per request, all on the shared in-memory connection."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeMediaStorage:
    """In-memory stand-in for the Cloudinary adapter."""

    def __init__(self):
        self.assets = {}
        self.fail_upload = False
        self.fail_destroy = False
        self._counter = 0

    def upload(self, content, *, folder=None, resource_type="auto", filename=None):
        if self.fail_upload:
            raise MediaStorageError("Cloudinary credentials are not configured")
        self._counter += 1
        public_id = f"{folder}/asset_{self._counter}" if folder else f"asset_{self._counter}"
        asset = {
            "public_id": public_id,
            "secure_url": f"https://res.cloudinary.test/{public_id}",
            "url": f"http://res.cloudinary.test/{public_id}",
            "resource_type": "image" if resource_type == "auto" else resource_type,
            "bytes": len(content),
            "width": 10,
            "height": 20,
            "format": "png",
            "folder": folder,
            "original_filename": filename,
        }
        self.assets[public_id] = asset
        return asset

    def destroy(self, public_id, *, resource_type="image"):
        if self.fail_destroy:
            raise MediaStorageError("Cloudinary refused to delete")
        self.assets.pop(public_id, None)
        return {"result": "ok"}


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON")
        return self._payload


class FakeYouTubeSession:
    """Replays canned responses keyed by the last URL path segment."""

    def __init__(self):
        self.headers = {}
        self.responses = {}
        self.calls = []
        self.error = None

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        if self.error is not None:
            raise self.error
        return self.responses[url.rsplit("/", 1)[-1]]


@pytest.fixture(scope="function")
def db():
    """Create a fresh database with seeded roles for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    init_db(session)

    app.dependency_overrides[get_db] = get_test_db

    yield session

    app.dependency_overrides.clear()
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client."""
    with TestClient(app) as c:
        yield c


def _make_user(db, username, roles, password="password123", status=None):
    data = {"username": username, "email": f"{username}@example.com", "password": password}
    if status is not None:
        data["status"] = status
    user = crud_user.create_user(db, user_in=data)
    if roles:
        crud_role.replace(db, user=user, role_names=roles)
    return crud_user.get_with_roles(db, user.id)


def _headers_for(user):
    token = create_access_token(user.id, user.username, user.role_names)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db):
    """Factory creating users with the given role names."""
    def _factory(username, roles=(), **kwargs):
        return _make_user(db, username, list(roles), **kwargs)
    return _factory


@pytest.fixture
def headers_for():
    return _headers_for


@pytest.fixture
def manager(db):
    return _make_user(db, "manager", ["manager"])


@pytest.fixture
def editor(db):
    return _make_user(db, "editor", ["editor"])


@pytest.fixture
def reader(db):
    """Authenticated user without any role."""
    return _make_user(db, "reader", [])


@pytest.fixture
def manager_headers(manager):
    return _headers_for(manager)


@pytest.fixture
def editor_headers(editor):
    return _headers_for(editor)


@pytest.fixture
def reader_headers(reader):
    return _headers_for(reader)


@pytest.fixture
def media_storage(db):
    storage = FakeMediaStorage()
    app.dependency_overrides[get_media_storage] = lambda: storage
    return storage


@pytest.fixture
def youtube_session(db):
    session = FakeYouTubeSession()
    app.dependency_overrides[get_youtube_client] = lambda: YouTubeClient("test-key", session=session)
    return session

