"""FileRecordPort - persistence of file metadata records.

The record store is the source of truth for whether a file exists to the
application; the object store only holds bytes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.shared.types import FileRecord


class FileRecordPort(ABC):
    """Port: FileRecord create / lookup / delete."""

    @abstractmethod
    async def create(self, record: FileRecord) -> FileRecord:
        """Persist a new record and return it with its store-assigned id."""

    @abstractmethod
    async def get_by_id(self, file_id: str) -> FileRecord | None:
        """Return the record with this id, or None."""

    @abstractmethod
    async def get_by_stored_name(self, stored_name: str) -> FileRecord | None:
        """Return the record with this generated filename, or None."""

    @abstractmethod
    async def delete(self, file_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
