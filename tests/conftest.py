"""Shared pytest fixtures and configuration."""

from collections.abc import Iterator

import pytest

from taskboard.board_store import BoardStore
from taskboard.persistence import Database, SnapshotAdapter


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def database() -> Iterator[Database]:
    """In-memory database with tables created."""
    db = Database(":memory:")
    db.create_tables()
    yield db
    db.close()


@pytest.fixture
def adapter(database: Database) -> SnapshotAdapter:
    """Snapshot adapter over the in-memory database."""
    return SnapshotAdapter(database)


@pytest.fixture
def store(adapter: SnapshotAdapter) -> BoardStore:
    """Unbound BoardStore."""
    return BoardStore(adapter)


@pytest.fixture
def bound_store(store: BoardStore) -> BoardStore:
    """BoardStore bound to a fresh user with the default board."""
    store.bind("user-1")
    return store
