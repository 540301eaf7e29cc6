"""Shared Fake adapters for testing without unittest.mock.

All Fake implementations follow the Port DI adapter pattern:
real Python classes with preset return values, no AsyncMock/MagicMock.
"""

from tests.fakes.ports import (
    FakeObjectStorage,
    InMemoryFileRecordStore,
    InMemoryMessageLinks,
    InMemoryRooms,
    InMemoryUserProfiles,
)
from tests.fakes.records import make_record
from tests.fakes.session import (
    FakeAsyncSession,
    FakeOrmRow,
    FakeResult,
    FakeSessionFactory,
)

__all__ = [
    "FakeAsyncSession",
    "FakeObjectStorage",
    "FakeOrmRow",
    "FakeResult",
    "FakeSessionFactory",
    "InMemoryFileRecordStore",
    "InMemoryMessageLinks",
    "InMemoryRooms",
    "InMemoryUserProfiles",
    "make_record",
]
