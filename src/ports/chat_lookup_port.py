"""Read-only ports onto chat entities owned by other components.

Access checks for chat attachments walk file -> message -> room ->
participants. Each hop is a separate port returning None on absence; there
is no aggregate that joins them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.shared.types import MessageLink, Room


class MessageLinkPort(ABC):
    """Port: resolve the message that carries a file attachment."""

    @abstractmethod
    async def find_by_file_id(self, file_id: str) -> MessageLink | None:
        """Return the message referencing ``file_id``, or None."""


class RoomPort(ABC):
    """Port: resolve a room's participant set."""

    @abstractmethod
    async def get_room(self, room_id: str) -> Room | None:
        """Return the room, or None if it no longer exists."""
