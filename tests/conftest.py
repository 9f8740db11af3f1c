"""Common test fixtures for all test modules"""
import pytest

from fastapi.testclient import TestClient

from core.config import Settings
from core.db import Base, create_db_engine, create_session_factory
from factories import NOW
from store.video_store import VideoStore


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        hero_pinned_ids="",
        support_salt="test-salt",
        local_utc_offset_hours=9,
        max_candidates=1000,
    )


@pytest.fixture
def session():
    """Fresh in-memory SQLite database per test"""
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(engine)
    db = create_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def store(session):
    return VideoStore(session)


@pytest.fixture
def client(session, settings):
    """API client wired to the test database and settings"""
    from app.main import app
    from app.deps.common import get_app_settings, get_db_session

    def _session():
        yield session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_app_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
