"""
Pytest configuration.

This file adds the project root to the Python path so that tests can import
from the domain, repositories, services, api and scripts modules, and provides
record store fixtures backed by in-memory storage.
"""

import itertools
import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from repositories.storage import InMemoryStorage, PersistenceError  # noqa: E402
from services.record_store import RecordStore  # noqa: E402

# 2025-01-01T00:00:00Z in epoch milliseconds
BASE_MILLIS = 1_735_689_600_000


class FailingStorage(InMemoryStorage):
    """In-memory storage whose writes fail once `fail` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def save(self, key: str, value: str) -> None:
        if self.fail:
            raise PersistenceError("quota exceeded")
        super().save(key, value)


def ticking_clock(start: int = BASE_MILLIS, step: int = 1000):
    """Clock returning strictly increasing epoch milliseconds."""
    counter = itertools.count(start, step)
    return lambda: next(counter)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage: InMemoryStorage) -> RecordStore:
    return RecordStore.open(storage, clock=ticking_clock())


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()
