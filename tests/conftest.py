"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SMTP_HOST", "")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import bookshelf.models  # noqa: E402,F401
from bookshelf.database import Base, get_db  # noqa: E402
from bookshelf.services.auth import AuthService  # noqa: E402
from bookshelf.services.jwt import get_jwt_service  # noqa: E402


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from bookshelf.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


def make_user(db_session: Session, username: str, email: str, password: str = "secret1") -> dict:
    """Sign up a user directly through the service and return its data, token and auth headers."""
    user = AuthService().signup(db_session, username, email, password)
    token = get_jwt_service().create_token(user.id)
    return {
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
        "password": password,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Create a test user and return its data and session token."""
    return make_user(db_session, "alice", "alice@example.com")


@pytest.fixture(name="other_user")
def other_user_fixture(db_session: Session):
    """A second user who must never see the first user's shelves."""
    return make_user(db_session, "bob", "bob@example.com", "hunter22")


@pytest.fixture(name="book_factory")
def book_factory_fixture(client: TestClient, test_user: dict):
    """Create books through the API as the test user."""

    def create(title: str = "Dune", authors: list[str] | None = None, **fields) -> dict:
        payload = {"title": title, "authors": authors or ["Frank Herbert"], **fields}
        response = client.post("/api/books", json=payload, headers=test_user["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return create
