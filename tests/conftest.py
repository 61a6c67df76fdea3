"""Pytest configuration and fixtures."""

import os
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.database import Base, get_db
from src.main import app
from src.models import Role, User
from src.services.credentials import create_access_token
from src.services.errors import MailDeliveryError, UploadError
from src.services.image_host import ImageFile, get_image_host
from src.services.mailer import get_mail_transport
from src.services.otp import InMemoryOtpLedger, get_otp_ledger


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class FakeImageHost:
    """Records uploads instead of calling Cloudinary."""

    def __init__(self):
        self.uploads: list[ImageFile] = []
        self.fail = False

    def upload_file(self, image: ImageFile) -> str:
        if self.fail:
            raise UploadError()
        self.uploads.append(image)
        return f"https://images.test/{len(self.uploads)}.png"


class FakeMailTransport:
    """Records outgoing mail instead of talking to SMTP."""

    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    def send(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise MailDeliveryError()
        self.sent.append((to, subject, body))

    def last_code(self) -> str:
        return self.sent[-1][2].rsplit(": ", 1)[1]


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/social_feed", "/social_feed_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def image_host():
    return FakeImageHost()


@pytest.fixture
def mailer():
    return FakeMailTransport()


@pytest.fixture
def otp_ledger():
    return InMemoryOtpLedger(ttl=timedelta(minutes=10))


@pytest.fixture(scope="function")
def client(db, image_host, mailer, otp_ledger):
    """Create a test client with database and external service overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_host] = lambda: image_host
    app.dependency_overrides[get_mail_transport] = lambda: mailer
    app.dependency_overrides[get_otp_ledger] = lambda: otp_ledger
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Factory that registers an account and returns its auth headers."""

    def _register(
        name: str = "Test User",
        email: str = "test@example.com",
        password: str = "testpass123",
        role: str = "user",
    ) -> AuthHeaders:
        data = {"role": role, "name": name, "email": email, "password": password}
        files = None
        if role == "organization":
            data["description"] = f"{name} helps people"
            files = {"proofImage": ("proof.png", b"\x89PNG proof", "image/png")}
        response = client.post("/api/auth/register", data=data, files=files)
        assert response.status_code == 201, response.text
        body = response.json()
        return AuthHeaders(
            {"Authorization": f"Bearer {body['token']}"},
            user_id=body["data"]["id"],
            email=email,
        )

    return _register


@pytest.fixture
def make_admin(db):
    """Factory that seeds an admin account directly and returns its auth headers.

    Admins cannot come through the public register endpoint.
    """

    def _make_admin(
        name: str = "Admin",
        email: str = "admin@example.com",
        password: str = "adminpass123",
    ) -> AuthHeaders:
        admin = User(name=name, email=email, password=password, role=Role.ADMIN, is_verified=True)
        db.add(admin)
        db.commit()
        db.refresh(admin)
        token = create_access_token(admin.id, Role.ADMIN)
        return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=admin.id, email=email)

    return _make_admin


@pytest.fixture
def auth_headers(register):
    """Create a user and return auth headers with user info."""
    return register()
