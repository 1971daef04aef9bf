"""Test configuration: isolated in-memory stores per test."""

import pytest

from image_foundry.db import create_session_engine, init_db
from image_foundry.services import SessionStore

from tests.fakes import RecordingStore


@pytest.fixture
def engine():
    """Fresh in-memory SQLite engine for each test."""
    engine = create_session_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return SessionStore(engine)


@pytest.fixture
def recording_store(engine):
    return RecordingStore(engine)
