"""AccessEvaluator policy: owner-only deletes and profiles, room membership for chat reads."""

from __future__ import annotations

import pytest

from src.files.access import (
    DENY_NOT_OWNER,
    DENY_NOT_PARTICIPANT,
    DENY_PROFILE,
    AccessEvaluator,
)
from src.shared.errors import NotFoundError
from src.shared.types import FileCategory, FileOperation
from tests.fakes import InMemoryMessageLinks, InMemoryRooms, make_record


@pytest.mark.unit
class TestProfileRead:
    async def test_owner_allowed(self, access: AccessEvaluator) -> None:
        record = make_record(uploader_id="u1", category=FileCategory.PROFILE)
        decision = await access.can_access(record, "u1", FileOperation.READ)
        assert decision.allowed

    async def test_other_user_denied(self, access: AccessEvaluator) -> None:
        record = make_record(uploader_id="u1", category=FileCategory.PROFILE)
        decision = await access.can_access(record, "u2", FileOperation.READ)
        assert not decision.allowed
        assert decision.reason == DENY_PROFILE

    async def test_no_chat_lookups(
        self,
        access: AccessEvaluator,
        messages: InMemoryMessageLinks,
        rooms: InMemoryRooms,
    ) -> None:
        record = make_record(category=FileCategory.PROFILE)
        await access.can_access(record, "u2", FileOperation.READ)
        assert messages.lookups == []
        assert rooms.lookups == []


@pytest.mark.unit
class TestChatRead:
    async def test_participant_allowed(
        self,
        access: AccessEvaluator,
        messages: InMemoryMessageLinks,
        rooms: InMemoryRooms,
    ) -> None:
        record = make_record(uploader_id="u1")
        messages.attach(record.file_id, "r1")
        rooms.add("r1", "u1", "u2")

        decision = await access.can_access(record, "u2", FileOperation.READ)
        assert decision.allowed

    async def test_non_participant_denied(
        self,
        access: AccessEvaluator,
        messages: InMemoryMessageLinks,
        rooms: InMemoryRooms,
    ) -> None:
        record = make_record(uploader_id="u1")
        messages.attach(record.file_id, "r1")
        rooms.add("r1", "u1", "u2")

        decision = await access.can_access(record, "u3", FileOperation.READ)
        assert not decision.allowed
        assert decision.reason == DENY_NOT_PARTICIPANT

    async def test_uploader_who_left_room_denied(
        self,
        access: AccessEvaluator,
        messages: InMemoryMessageLinks,
        rooms: InMemoryRooms,
    ) -> None:
        record = make_record(uploader_id="u1")
        messages.attach(record.file_id, "r1")
        rooms.add("r1", "u2")

        decision = await access.can_access(record, "u1", FileOperation.READ)
        assert not decision.allowed

    async def test_missing_message_link_is_not_found(self, access: AccessEvaluator) -> None:
        record = make_record()
        with pytest.raises(NotFoundError) as exc_info:
            await access.can_access(record, "u1", FileOperation.READ)
        assert exc_info.value.resource_type == "message link"

    async def test_missing_room_is_not_found(
        self,
        access: AccessEvaluator,
        messages: InMemoryMessageLinks,
        rooms: InMemoryRooms,
    ) -> None:
        record = make_record()
        messages.attach(record.file_id, "gone")

        with pytest.raises(NotFoundError) as exc_info:
            await access.can_access(record, "u1", FileOperation.READ)
        assert exc_info.value.resource_type == "room"
        assert rooms.lookups == ["gone"]


@pytest.mark.unit
class TestDelete:
    @pytest.mark.parametrize("category", list(FileCategory))
    async def test_owner_allowed(self, access: AccessEvaluator, category: FileCategory) -> None:
        record = make_record(uploader_id="u1", category=category)
        decision = await access.can_access(record, "u1", FileOperation.DELETE)
        assert decision.allowed

    async def test_room_participant_cannot_delete(
        self,
        messages: InMemoryMessageLinks,
        rooms: InMemoryRooms,
    ) -> None:
        evaluator = AccessEvaluator(messages=messages, rooms=rooms)
        record = make_record(uploader_id="u1")
        messages.attach(record.file_id, "r1")
        rooms.add("r1", "u1", "u2")

        decision = await evaluator.can_access(record, "u2", FileOperation.DELETE)
        assert not decision.allowed
        assert decision.reason == DENY_NOT_OWNER
        assert messages.lookups == []
