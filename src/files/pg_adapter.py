"""PostgreSQL adapters for the file service Ports via SQLAlchemy.

- PgFileRecordStore   -> FileRecordPort   (files)
- PgMessageLinkReader -> MessageLinkPort  (messages, read-only)
- PgRoomReader        -> RoomPort         (rooms, read-only)
- PgUserProfileStore  -> UserProfilePort  (users.profile_image)

Each call opens its own session from the injected async_sessionmaker.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import sqlalchemy as sa

from src.infra.models import FileModel, MessageModel, RoomModel, UserModel
from src.ports.chat_lookup_port import MessageLinkPort, RoomPort
from src.ports.file_record_port import FileRecordPort
from src.ports.user_profile_port import UserProfilePort
from src.shared.errors import NotFoundError
from src.shared.types import FileCategory, FileRecord, MessageLink, Room

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


def _row_to_file_record(row: FileModel) -> FileRecord:
    return FileRecord(
        file_id=row.id,
        stored_name=row.filename,
        original_name=row.original_name,
        mime_type=row.mime_type,
        size_bytes=row.size_bytes,
        object_key=row.object_key,
        uploader_id=row.uploader_id,
        category=FileCategory(row.category),
        uploaded_at=row.uploaded_at,
    )


class PgFileRecordStore(FileRecordPort):
    """files table."""

    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, record: FileRecord) -> FileRecord:
        """Insert a row; the id is assigned here when the record has none."""
        file_id = record.file_id or uuid4().hex
        model = FileModel(
            id=file_id,
            filename=record.stored_name,
            original_name=record.original_name,
            mime_type=record.mime_type,
            size_bytes=record.size_bytes,
            object_key=record.object_key,
            uploader_id=record.uploader_id,
            category=record.category.value,
            uploaded_at=record.uploaded_at,
        )
        async with self._session_factory() as session:
            session.add(model)
            await session.commit()

        return replace(record, file_id=file_id)

    async def get_by_id(self, file_id: str) -> FileRecord | None:
        stmt = sa.select(FileModel).where(FileModel.id == file_id)
        return await self._fetch_one(stmt)

    async def get_by_stored_name(self, stored_name: str) -> FileRecord | None:
        stmt = sa.select(FileModel).where(FileModel.filename == stored_name)
        return await self._fetch_one(stmt)

    async def delete(self, file_id: str) -> bool:
        stmt = sa.delete(FileModel).where(FileModel.id == file_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount > 0

    async def _fetch_one(self, stmt: sa.Select[tuple[FileModel]]) -> FileRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        return _row_to_file_record(row) if row is not None else None


class PgMessageLinkReader(MessageLinkPort):
    """messages table, looked up by attached file id."""

    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_file_id(self, file_id: str) -> MessageLink | None:
        stmt = sa.select(MessageModel).where(MessageModel.file_id == file_id).limit(1)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        if row is None:
            return None
        return MessageLink(message_id=row.id, room_id=row.room_id, file_id=file_id)


class PgRoomReader(RoomPort):
    """rooms table."""

    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_room(self, room_id: str) -> Room | None:
        stmt = sa.select(RoomModel).where(RoomModel.id == room_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        if row is None:
            return None
        return Room(room_id=row.id, participant_ids=frozenset(row.participant_ids or ()))


class PgUserProfileStore(UserProfilePort):
    """users.profile_image."""

    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def exists(self, user_id: str) -> bool:
        stmt = sa.select(UserModel.id).where(UserModel.id == user_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def get_profile_image(self, user_id: str) -> str | None:
        stmt = sa.select(UserModel.profile_image).where(UserModel.id == user_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            value = result.scalar_one_or_none()
        return value or None

    async def set_profile_image(self, user_id: str, stored_name: str) -> None:
        stmt = (
            sa.update(UserModel)
            .where(UserModel.id == user_id)
            .values(profile_image=stored_name, updated_at=datetime.now(UTC))
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
        if result.rowcount == 0:
            raise NotFoundError("user", user_id)
        logger.debug("Profile image pointer updated user_id=%s", user_id)
