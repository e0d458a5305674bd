"""Root conftest - shared test configuration and fixtures."""

import os

import pytest
from sqlalchemy import create_engine

from ormtable.config import get_settings
from ormtable.db.connection_source import EngineConnectionSource
from tests.fakes import FakeConnectionSource, FakeDatabaseType, RecordingDao

# Ensure tests never pick up a real database from the environment
os.environ.setdefault("ORMTABLE_DATABASE_URL", "sqlite://")


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database_type():
    return FakeDatabaseType()


@pytest.fixture
def dao():
    return RecordingDao()


@pytest.fixture
def fake_connection_source(database_type):
    return FakeConnectionSource(database_type)


@pytest.fixture
def sqlite_connection_source():
    engine = create_engine("sqlite://")
    yield EngineConnectionSource(engine)
    engine.dispose()
