"""Shared pytest fixtures for all test suites."""

from collections.abc import Generator

import pytest
from sqlalchemy.orm import Session

from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.db.engine import create_engine_from_url, create_session_factory
from backend.app.db.models import Base
from backend.app.models.client import Client
from tests.factories import make_catalog, make_client


@pytest.fixture
def catalog() -> CatalogSnapshot:
    return make_catalog()


@pytest.fixture
def client() -> Client:
    return make_client()


@pytest.fixture
def sqlite_session() -> Generator[Session, None, None]:
    """Session on a fresh in-memory SQLite database with all tables created."""
    engine = create_engine_from_url("sqlite://")
    Base.metadata.create_all(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        yield session

    Base.metadata.drop_all(engine)
    engine.dispose()
