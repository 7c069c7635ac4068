"""Shared pytest fixtures for all test suites."""

from unittest.mock import AsyncMock

import pytest

from pdfchat.db.inmemory import InMemoryKeyValueStore
from pdfchat.history.store import HistoryStore


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def history(kv_store: InMemoryKeyValueStore) -> HistoryStore:
    """History store over the in-memory key-value store."""
    return HistoryStore(kv_store, key_prefix="test")


@pytest.fixture
def model() -> AsyncMock:
    """Remote model double answering every prompt with a fixed reply."""
    remote = AsyncMock()
    remote.generate.return_value = "Model answer."
    return remote
