"""Shared domain types used across layers.

These types flow through Port interfaces and must remain stable.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import datetime

# -- File types --


class FileCategory(enum.Enum):
    """Purpose of a stored file; selects its access-control policy."""

    CHAT = "CHAT"
    PROFILE = "PROFILE"


class FileOperation(enum.Enum):
    """Operation a requester wants to perform on a stored file."""

    READ = "read"
    DELETE = "delete"


_PREVIEWABLE_FAMILIES = frozenset({"image", "video", "audio"})
_PREVIEWABLE_TYPES = frozenset({"application/pdf"})


@dataclass(frozen=True)
class UploadMetadata:
    """Client-declared metadata for a pending upload."""

    original_filename: str
    content_type: str
    size: int


@dataclass(frozen=True)
class FileRecord:
    """Persisted metadata for one object in the object store.

    ``object_key`` and ``category`` never change after creation.
    """

    file_id: str
    stored_name: str
    original_name: str
    mime_type: str
    size_bytes: int
    object_key: str
    uploader_id: str
    category: FileCategory
    uploaded_at: datetime

    @property
    def is_previewable(self) -> bool:
        family = self.mime_type.split("/", 1)[0]
        return family in _PREVIEWABLE_FAMILIES or self.mime_type in _PREVIEWABLE_TYPES

    def to_public(self) -> dict[str, Any]:
        """Projection returned to API clients."""
        return {
            "id": self.file_id,
            "filename": self.stored_name,
            "original_name": self.original_name,
            "mime_type": self.mime_type,
            "size": self.size_bytes,
            "category": self.category.value,
            "upload_date": self.uploaded_at.isoformat(),
        }


@dataclass(frozen=True)
class MessageLink:
    """Message that carries a file attachment, and the room it was posted in."""

    message_id: str
    room_id: str
    file_id: str


@dataclass(frozen=True)
class Room:
    """Chat room participant set."""

    room_id: str
    participant_ids: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an access check. Never persisted."""

    allowed: bool
    reason: str = ""

    @classmethod
    def allow(cls) -> AccessDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> AccessDecision:
        return cls(allowed=False, reason=reason)


# -- Object Storage types --


@dataclass(frozen=True)
class PresignedUploadURL:
    """Presigned URL for object upload."""

    url: str
    expires_at: datetime
    conditions: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PresignedDownloadURL:
    """Presigned URL for object download."""

    url: str
    expires_at: datetime


# -- Service results --


@dataclass(frozen=True)
class UploadGrant:
    """Everything a client needs to PUT a file directly to the object store."""

    url: str
    headers: dict[str, str]
    expires_at: datetime
    record: FileRecord


@dataclass(frozen=True)
class AccessGrant:
    """Signed GET capability for one stored file."""

    url: str
    headers: dict[str, str]
    expires_at: datetime
    filename: str
    content_type: str
    inline: bool


__all__ = [
    "AccessDecision",
    "AccessGrant",
    "FileCategory",
    "FileOperation",
    "FileRecord",
    "MessageLink",
    "PresignedDownloadURL",
    "PresignedUploadURL",
    "Room",
    "UploadGrant",
    "UploadMetadata",
]
