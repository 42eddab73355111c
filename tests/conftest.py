"""Shared fixtures for relnet tests."""

import pytest

from relnet.store import SnapshotStore


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def empty_store():
    """Fresh in-memory store with the snapshot schema and no rows."""
    store = SnapshotStore.create()
    yield store
    store.close()


@pytest.fixture
def store(empty_store):
    """Store with alice, bob and kim, and two relationships."""
    empty_store.insert_character("alice", "Alice", "#ff0000", group="crew")
    empty_store.insert_character("bob", "Bob", "#00ff00")
    empty_store.insert_character("kim", "Kim", "#0000ff", group="crew")
    empty_store.upsert_relationship("alice", "bob", "likes", "old friends")
    empty_store.upsert_relationship("kim", "alice", "hates")
    return empty_store


@pytest.fixture
def snapshot_bytes(store):
    """Serialized image of the `store` fixture."""
    return store.export()


# =============================================================================
# Utility Functions
# =============================================================================


def relationship_map(store) -> dict:
    """Map (source, target) -> (type, strength, notes) for every relationship."""
    return {
        rel.key: (rel.rel_type.value, rel.strength, rel.notes)
        for rel in store.list_relationships()
    }


# =============================================================================
# Pytest Markers
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "store: tests for the snapshot store")
    config.addinivalue_line("markers", "interaction: tests for the interaction state machine")
