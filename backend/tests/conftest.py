import os
import tempfile

# Test settings must be in place before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["DB_INIT_MODE"] = "off"
os.environ["COOKIE_SECURE"] = "false"
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-secret-for-testing-only-minimum-32-chars"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret-for-testing-only-minimum-32-chars"
os.environ["LOG_FILE"] = os.path.join(tempfile.gettempdir(), "videotube-tests", "app.log")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.schemas.user import UserRegister
from app.services.user_service import user_service


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_user(db):
    def _make(username="alice", email=None, password="P@ss1", full_name=None):
        return user_service.register_user(
            db,
            UserRegister(
                username=username,
                email=email or f"{username}@x.com",
                full_name=full_name or username.title(),
                password=password,
            ),
        )
    return _make


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
