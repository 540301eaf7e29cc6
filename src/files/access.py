"""Access control for stored files.

Policy:
  - DELETE, any category: uploader only. A room participant who did not
    upload a shared attachment must not be able to destroy it.
  - READ, PROFILE: uploader only; no further lookups.
  - READ, CHAT: file -> message link -> room -> participants. A missing
    link or room is NotFoundError (fail closed), not a denial.

The evaluator holds no state; each hop is an independent Port lookup with
early exit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.shared.errors import NotFoundError
from src.shared.types import AccessDecision, FileCategory, FileOperation

if TYPE_CHECKING:
    from src.ports.chat_lookup_port import MessageLinkPort, RoomPort
    from src.shared.types import FileRecord

logger = logging.getLogger(__name__)

DENY_NOT_OWNER = "not the file owner"
DENY_PROFILE = "no permission on profile image"
DENY_NOT_PARTICIPANT = "not a room participant"


class AccessEvaluator:
    """Decides whether a requester may read or delete a stored file."""

    def __init__(self, *, messages: MessageLinkPort, rooms: RoomPort) -> None:
        self._messages = messages
        self._rooms = rooms

    async def can_access(
        self,
        record: FileRecord,
        requester_id: str,
        operation: FileOperation,
    ) -> AccessDecision:
        """Evaluate access.

        Raises:
            NotFoundError: For a chat file whose message link or room is gone.
        """
        if operation is FileOperation.DELETE:
            return _owner_only(record, requester_id, DENY_NOT_OWNER)

        if record.category is FileCategory.PROFILE:
            return _owner_only(record, requester_id, DENY_PROFILE)

        return await self._check_room_membership(record, requester_id)

    async def _check_room_membership(
        self,
        record: FileRecord,
        requester_id: str,
    ) -> AccessDecision:
        link = await self._messages.find_by_file_id(record.file_id)
        if link is None:
            # Orphaned upload: record created but never attached to a message
            logger.warning("Chat file has no message link file_id=%s", record.file_id)
            raise NotFoundError("message link", record.file_id)

        room = await self._rooms.get_room(link.room_id)
        if room is None:
            raise NotFoundError("room", link.room_id)

        if requester_id in room.participant_ids:
            return AccessDecision.allow()
        return AccessDecision.deny(DENY_NOT_PARTICIPANT)


def _owner_only(record: FileRecord, requester_id: str, reason: str) -> AccessDecision:
    if requester_id == record.uploader_id:
        return AccessDecision.allow()
    return AccessDecision.deny(reason)
