"""Root conftest - shared fixtures for all test layers.

Markers:
    @pytest.mark.unit       - No external deps
    @pytest.mark.e2e        - End-to-end through the HTTP API (in-process fakes)
"""

from __future__ import annotations

import pytest

from src.files.access import AccessEvaluator
from src.files.service import PresignedFileService
from src.files.settings import FileServiceSettings
from tests.fakes import (
    FakeObjectStorage,
    InMemoryFileRecordStore,
    InMemoryMessageLinks,
    InMemoryRooms,
)

TEST_BUCKET = "chat-files-test"


@pytest.fixture
def settings() -> FileServiceSettings:
    return FileServiceSettings(bucket=TEST_BUCKET)


@pytest.fixture
def records() -> InMemoryFileRecordStore:
    return InMemoryFileRecordStore()


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def messages() -> InMemoryMessageLinks:
    return InMemoryMessageLinks()


@pytest.fixture
def rooms() -> InMemoryRooms:
    return InMemoryRooms()


@pytest.fixture
def access(messages: InMemoryMessageLinks, rooms: InMemoryRooms) -> AccessEvaluator:
    return AccessEvaluator(messages=messages, rooms=rooms)


@pytest.fixture
def file_service(
    records: InMemoryFileRecordStore,
    storage: FakeObjectStorage,
    access: AccessEvaluator,
    settings: FileServiceSettings,
) -> PresignedFileService:
    return PresignedFileService(
        records=records,
        storage=storage,
        access=access,
        settings=settings,
    )
