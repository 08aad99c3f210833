import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["STORAGE_BACKEND"] = "database"
os.environ["BOOTSTRAP_ON_STARTUP"] = "false"
os.environ["API_TOKEN"] = "test-token"
os.environ["PUBLIC_URL"] = "https://builds.example.com"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="build-uploads-")

import copy

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: register all models
from app.storage import DatabaseStorage, MemoryStorage

from fastapi.testclient import TestClient

AXE_BUILD = {
    "name": "Axe Build",
    "activityType": "Solo PvP",
    "commandAlias": "axe-1",
    "equipment": {"weapon": {"name": "Axe", "tier": "T8"}},
}


@pytest.fixture
def make_payload():
    """Factory for build payloads in wire (camelCase) form."""

    def _make(**overrides):
        payload = copy.deepcopy(AXE_BUILD)
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def db_engine():
    # Use StaticPool to keep the same in-memory db across connections
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture(params=["memory", "database"])
def storage(request, db_session):
    """Each storage test runs against both backends."""
    if request.param == "memory":
        return MemoryStorage()
    return DatabaseStorage(db_session)


@pytest.fixture
def client(db_engine):
    Session = sessionmaker(bind=db_engine)

    def _override():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def authed_client(client, db_session):
    """A client that is logged in as admin."""
    from app.schemas.user import UserCreate
    from app.services.auth import hash_password

    DatabaseStorage(db_session).create_user(
        UserCreate(
            username="testadmin",
            password_hash=hash_password("testpass"),
            is_admin=True,
        )
    )

    client.post("/api/login", json={"username": "testadmin", "password": "testpass"})
    return client
