"""
Shared fixtures: an in-memory database and a test client bound to it.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import settleup.models  # noqa: F401
from settleup.db.base import Base
from settleup.db.session import get_db
from settleup.main import app
from settleup.schemas.user import User


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite session per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Test client whose requests use the in-memory session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def alice():
    return User(id="alice", name="Alice", email="alice@example.com")


@pytest.fixture
def bob():
    return User(id="bob", name="Bob")


@pytest.fixture
def carol():
    return User(id="carol", name="Carol")


@pytest.fixture
def dave():
    return User(id="dave", name="Dave")
