"""SQLAlchemy ORM models for the chat files service.

Maps to migrations/versions/001_create_file_tables.py.

``files`` is owned by this service. ``messages``, ``rooms`` and ``users``
belong to the chat and account components; this service only reads
messages/rooms and updates ``users.profile_image``.

These models live in the Infrastructure layer; domain code goes through the
Ports and never imports this module.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 -- SQLAlchemy resolves Mapped[] annotations at runtime
from uuid import uuid4

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

_NOW = sa.text("now()")
_ID_LENGTH = 64


def _new_id() -> str:
    return uuid4().hex


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class FileModel(Base):
    """Metadata for one object in the object store."""

    __tablename__ = "files"

    id: Mapped[str] = mapped_column(
        sa.String(_ID_LENGTH),
        primary_key=True,
        default=_new_id,
    )
    filename: Mapped[str] = mapped_column(
        sa.String(255),
        nullable=False,
        comment="Generated stored filename",
    )
    original_name: Mapped[str] = mapped_column(sa.String(1024), nullable=False)
    mime_type: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    size_bytes: Mapped[int] = mapped_column(sa.BigInteger(), nullable=False)
    object_key: Mapped[str] = mapped_column(sa.String(1024), nullable=False)
    uploader_id: Mapped[str] = mapped_column(sa.String(_ID_LENGTH), nullable=False)
    category: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (
        sa.Index("ix_files_filename", "filename", unique=True),
        sa.Index("ix_files_uploader_category", "uploader_id", "category"),
        sa.CheckConstraint("category IN ('CHAT', 'PROFILE')", name="ck_files_category"),
        sa.CheckConstraint("size_bytes > 0", name="ck_files_size_positive"),
    )


class MessageModel(Base):
    """Chat message (only the columns the file service reads)."""

    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(sa.String(_ID_LENGTH), primary_key=True, default=_new_id)
    room_id: Mapped[str] = mapped_column(sa.String(_ID_LENGTH), nullable=False)
    file_id: Mapped[str | None] = mapped_column(sa.String(_ID_LENGTH), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (sa.Index("ix_messages_file_id", "file_id"),)


class RoomModel(Base):
    """Chat room with its participant ids."""

    __tablename__ = "rooms"

    id: Mapped[str] = mapped_column(sa.String(_ID_LENGTH), primary_key=True, default=_new_id)
    participant_ids: Mapped[list[str]] = mapped_column(
        sa.JSON(),
        nullable=False,
        default=list,
    )


class UserModel(Base):
    """User account (only the profile image column is written here)."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(sa.String(_ID_LENGTH), primary_key=True, default=_new_id)
    profile_image: Mapped[str] = mapped_column(
        sa.String(255),
        nullable=False,
        server_default="",
        comment="Stored filename of the current profile image",
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )
