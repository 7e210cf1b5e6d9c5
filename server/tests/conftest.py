"""Pytest configuration and fixtures for the wishlist tests."""

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from wishlist.api.deps import get_db
from wishlist.main import app
from wishlist.models.base import Base
from wishlist.models.feature_request import FeatureRequest, FeatureStatus
from wishlist.models.user import User, UserRole
from wishlist.services.auth import get_password_hash

# Use SQLite in-memory for tests (fast, isolated)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session here, let the db fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _make_user(db: Session, username: str, password: str, role: str) -> User:
    user = User(username=username, password_hash=get_password_hash(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _login(client: TestClient, username: str, password: str) -> dict[str, str]:
    response = client.post("/api/auth/login", data={"username": username, "password": password})
    assert response.status_code == 200, f"Login failed: {response.json()}"
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a regular (non-admin) user."""
    return _make_user(db, "testuser", "testpassword123", UserRole.USER.value)


@pytest.fixture
def admin_user(db: Session) -> User:
    """Create an admin user."""
    return _make_user(db, "adminuser", "adminpassword123", UserRole.ADMIN.value)


@pytest.fixture
def auth_headers(client: TestClient, test_user: User) -> dict[str, str]:
    return _login(client, "testuser", "testpassword123")


@pytest.fixture
def admin_headers(client: TestClient, admin_user: User) -> dict[str, str]:
    return _login(client, "adminuser", "adminpassword123")


@pytest.fixture
def make_feature(db: Session) -> Callable[..., FeatureRequest]:
    """Factory inserting a feature directly, bypassing the catalog service."""

    def _make(
        title: str = "Test Feature",
        status: FeatureStatus = FeatureStatus.OPEN,
        **kwargs,
    ) -> FeatureRequest:
        feature = FeatureRequest(title=title, status=status.value, **kwargs)
        db.add(feature)
        db.commit()
        db.refresh(feature)
        return feature

    return _make


@pytest.fixture
def test_feature(make_feature) -> FeatureRequest:
    return make_feature(
        title="Dark Mode",
        description="Easier on the eyes at night.",
        category="UI/UX",
    )
