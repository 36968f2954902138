"""Pytest fixtures for testing"""

import httpx
import pytest
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from ride_ledger.api.main import create_app
from ride_ledger.api.dependencies import get_auth_client, get_current_user
from ride_ledger.domain.models import UserIdentity
from ride_ledger.infrastructure.clients.auth import AuthClient
from ride_ledger.infrastructure.database.models import Base
from ride_ledger.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

TEST_USER = UserIdentity(id="driver-1", email="driver@example.com")
OTHER_USER = UserIdentity(id="driver-2", email="other@example.com")


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


def _build_app(db: Session):
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(db: Session) -> TestClient:
    """Test client signed in as TEST_USER"""
    app = _build_app(db)
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    return TestClient(app)


@pytest.fixture
def other_client(db: Session) -> TestClient:
    """Second driver sharing the same database"""
    app = _build_app(db)
    app.dependency_overrides[get_current_user] = lambda: OTHER_USER
    return TestClient(app)


@pytest.fixture
def auth_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Stand-in auth provider: one known account, one valid token"""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/auth/v1/token":
            if b"driver@example.com" in request.content and b"secret123" in request.content:
                return httpx.Response(
                    200,
                    json={
                        "access_token": "valid-token",
                        "refresh_token": "refresh-token",
                        "expires_in": 3600,
                        "user": {"id": TEST_USER.id, "email": TEST_USER.email},
                    },
                )
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})

        if path == "/auth/v1/signup":
            if b"driver@example.com" in request.content:
                return httpx.Response(422, json={"code": 422, "msg": "User already registered"})
            return httpx.Response(200, json={"id": "new-driver", "email": "new@example.com", "email_confirmed_at": None})

        if path == "/auth/v1/user":
            if request.headers.get("Authorization") == "Bearer valid-token":
                return httpx.Response(200, json={"id": TEST_USER.id, "email": TEST_USER.email})
            return httpx.Response(401, json={"msg": "invalid JWT"})

        if path == "/auth/v1/logout":
            return httpx.Response(204)

        return httpx.Response(404)

    return handler


@pytest.fixture
def auth_client(auth_handler) -> AuthClient:
    return AuthClient(base_url="http://auth.test", api_key="anon-key", transport=httpx.MockTransport(auth_handler))


@pytest.fixture
def anon_client(db: Session, auth_client: AuthClient) -> TestClient:
    """Test client with real token resolution against the stand-in auth provider"""
    app = _build_app(db)
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    return TestClient(app)
