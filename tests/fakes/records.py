"""FileRecord builder for access, delete and adapter tests."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from src.shared.types import FileCategory, FileRecord


def make_record(
    *,
    uploader_id: str = "u1",
    category: FileCategory = FileCategory.CHAT,
    mime_type: str = "image/png",
    original_name: str = "photo.png",
    stored_name: str | None = None,
    file_id: str | None = None,
) -> FileRecord:
    """Build a persisted-looking FileRecord."""
    stored = stored_name or f"1700000000000_{uuid4().hex[:16]}.png"
    return FileRecord(
        file_id=file_id or uuid4().hex,
        stored_name=stored,
        original_name=original_name,
        mime_type=mime_type,
        size_bytes=2048,
        object_key=f"uploads/{category.name.lower()}/{uploader_id}/{stored}",
        uploader_id=uploader_id,
        category=category,
        uploaded_at=datetime(2026, 1, 1, tzinfo=UTC),
    )
