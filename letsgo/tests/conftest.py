"""
Pytest configuration and shared fixtures for the Let's Go Party tests.
"""

import os
import smtplib
import tempfile
from datetime import timedelta
from typing import Generator

_TEST_DIR = tempfile.mkdtemp(prefix="letsgo-tests-")

# Required settings must exist before the application modules are imported
os.environ.setdefault("JWT_SECRET", "test-secret-key-32-characters-minimum-length")
os.environ.setdefault("EMAIL_USER", "noreply@letsgo.test")
os.environ.setdefault("EMAIL_PASSWORD", "smtp-password")
os.environ.setdefault("GOOGLE_CLIENT_ID", "google-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "google-client-secret")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")
os.environ.setdefault("PUBLIC_API_URL", "http://api.test")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_DIR}/app.db")
os.environ.setdefault("ASSETS_DIR", os.path.join(_TEST_DIR, "assets"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

import letsgo.models as models
from letsgo.core.deps import get_image_storage, get_mailer
from letsgo.core.security import create_access_token, get_password_hash, utcnow
from letsgo.db import get_db
from letsgo.db.base import Base
from letsgo.main import app
from letsgo.services.storage import ImageStorage


class FakeMailer:
    """Collects outgoing mail instead of talking to an SMTP relay."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, body_html, reply_to=None):
        if self.fail:
            raise smtplib.SMTPException("relay unavailable")
        self.sent.append(
            {"to": to, "subject": subject, "html": body_html, "reply_to": reply_to}
        )


@pytest.fixture(scope="session")
def test_engine():
    """Create a test database engine on a temporary SQLite file."""
    temp_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    temp_file.close()
    return create_engine(
        f"sqlite:///{temp_file.name}", connect_args={"check_same_thread": False}
    )


@pytest.fixture(scope="session")
def test_session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session(test_session_factory, test_engine) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = test_session_factory()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def storage(tmp_path) -> ImageStorage:
    return ImageStorage(tmp_path / "uploads" / "images")


@pytest.fixture(scope="function")
def client(db_session, mailer, storage) -> Generator[TestClient, None, None]:
    """Create a test client with database, mail and storage overrides."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_image_storage] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory for persisted users."""

    def _make_user(email="ana@example.com", password="secret123", verified=True, **kwargs):
        user = models.User(
            email=email,
            name=kwargs.pop("name", "Ana"),
            password_hash=get_password_hash(password) if password else "",
            verified=verified,
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_event(db_session):
    """Factory for persisted events, one day ahead unless ``date`` is given."""

    def _make_event(owner, title="Festa", **kwargs):
        kwargs.setdefault("date", utcnow() + timedelta(days=1))
        kwargs.setdefault(
            "image", {"path": "/assets/uploads/images/seed.png", "filename": "seed.png"}
        )
        event = models.Event(title=title, user_id=owner.id, **kwargs)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make_event


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers
