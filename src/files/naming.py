"""Stored filename and object key generation.

Uniqueness of a stored object is carried entirely by the generated name
(millisecond timestamp + 64 random bits), never by the user-supplied one, so
two uploads of "photo.png" by the same user land on different keys without a
database retry loop.
"""

from __future__ import annotations

import secrets
import time
import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.shared.types import FileCategory

_RANDOM_BYTES = 8  # 16 hex chars
_FALLBACK_BASE = "file"


def get_file_extension(filename: str) -> str:
    """Return the text after the last dot, case preserved.

    Empty when the name has no dot or ends with one.
    """
    if not filename:
        return ""
    last_dot = filename.rfind(".")
    if last_dot == -1 or last_dot == len(filename) - 1:
        return ""
    return filename[last_dot + 1 :]


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


def generate_safe_name(original_filename: str) -> str:
    """Build ``<unix-millis>_<16 hex>[.<ext>]`` from an original filename."""
    random_hex = secrets.token_hex(_RANDOM_BYTES)
    timestamp = _now_millis()

    if not original_filename or not original_filename.strip():
        return f"{_FALLBACK_BASE}_{timestamp}_{random_hex}"

    extension = get_file_extension(original_filename)
    if extension:
        return f"{timestamp}_{random_hex}.{extension}"
    return f"{timestamp}_{random_hex}"


def normalize_original_filename(original_filename: str) -> str:
    """Strip path separators and NFC-normalize the display name."""
    if not original_filename:
        return ""
    cleaned = original_filename.replace("/", "").replace("\\", "")
    return unicodedata.normalize("NFC", cleaned)


def build_object_key(
    prefix: str,
    category: FileCategory,
    uploader_id: str,
    stored_name: str,
) -> str:
    """Join ``prefix/category/uploader/stored_name``.

    Partitioning by uploader and category lets bulk lifecycle operations run
    as key-prefix scans.
    """
    if prefix.endswith("/"):
        prefix = prefix[:-1]
    parts = (category.name.lower(), uploader_id, stored_name)
    if prefix:
        parts = (prefix, *parts)
    return "/".join(parts)


def stored_name_from_key(object_key: str) -> str:
    """Return the trailing path segment of an object key."""
    return object_key.rsplit("/", 1)[-1]
