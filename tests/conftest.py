"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

import crud
from config import Settings
from main import create_app
from seed import ADVOCATE_DATA


@pytest.fixture
def settings():
    """Settings for an in-memory SQLite database."""
    return Settings(database_url="sqlite:///:memory:", environment="testing")


@pytest.fixture
def app(settings):
    """Application bound to a fresh in-memory database."""
    app = create_app(settings)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def session(app):
    """Session sharing the application's database."""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(session):
    """The fixed fifteen advocate dataset, inserted."""
    return crud.bulk_create_advocates(session, ADVOCATE_DATA)


@pytest.fixture
def client(app):
    """HTTP client for the application (startup hooks not run)."""
    return TestClient(app)
