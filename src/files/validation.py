"""Upload metadata validation.

Checks run in a fixed order and the first failure wins:
  1. filename present (after strip)
  2. filename <= 255 bytes as UTF-8
  3. content type on the allow-list
  4. extension allowed for that content type
  5. size is a positive integer
  6. size within the content type family limit

Profile images add a stricter pass on top (image types only, configurable
maximum size).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from src.files.naming import get_file_extension
from src.shared.errors import InvalidMetadataError

if TYPE_CHECKING:
    from src.shared.types import UploadMetadata

_MIB: Final = 1024 * 1024
MAX_FILENAME_BYTES: Final = 255

ALLOWED_TYPES: Final = MappingProxyType(
    {
        "image/jpeg": frozenset({"jpg", "jpeg"}),
        "image/png": frozenset({"png"}),
        "image/gif": frozenset({"gif"}),
        "image/webp": frozenset({"webp"}),
        "video/mp4": frozenset({"mp4"}),
        "video/webm": frozenset({"webm"}),
        "video/quicktime": frozenset({"mov"}),
        "audio/mpeg": frozenset({"mp3"}),
        "audio/wav": frozenset({"wav"}),
        "audio/ogg": frozenset({"ogg"}),
        "application/pdf": frozenset({"pdf"}),
        "application/msword": frozenset({"doc"}),
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": frozenset(
            {"docx"}
        ),
    }
)

FILE_SIZE_LIMITS: Final = MappingProxyType(
    {
        "image": 10 * _MIB,
        "video": 50 * _MIB,
        "audio": 20 * _MIB,
        "application": 20 * _MIB,
    }
)

PROFILE_IMAGE_TYPES: Final = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
DEFAULT_PROFILE_IMAGE_MAX_SIZE: Final = 5 * _MIB

_FAMILY_LABELS: Final = MappingProxyType(
    {
        "image": "Image",
        "video": "Video",
        "audio": "Audio",
        "application": "Document",
    }
)


def _family(content_type: str) -> str:
    return content_type.split("/", 1)[0]


def _label(content_type: str) -> str:
    return _FAMILY_LABELS.get(_family(content_type), "File")


def size_limit_for(content_type: str) -> int:
    """Byte limit for the content type's family (documents for unknown families)."""
    return FILE_SIZE_LIMITS.get(_family(content_type), FILE_SIZE_LIMITS["application"])


def validate_metadata(metadata: UploadMetadata) -> None:
    """Validate declared upload metadata.

    Raises:
        InvalidMetadataError: On the first rule violated.
    """
    filename = metadata.original_filename or ""
    if not filename.strip():
        raise InvalidMetadataError("Filename is empty", rule="filename_empty")

    if len(filename.encode("utf-8")) > MAX_FILENAME_BYTES:
        raise InvalidMetadataError(
            f"Filename exceeds {MAX_FILENAME_BYTES} bytes",
            rule="filename_too_long",
        )

    content_type = metadata.content_type
    allowed_extensions = ALLOWED_TYPES.get(content_type or "")
    if allowed_extensions is None:
        raise InvalidMetadataError(
            f"Unsupported content type: {content_type}",
            rule="content_type",
        )

    extension = get_file_extension(filename).lower()
    if extension not in allowed_extensions:
        raise InvalidMetadataError(
            f"{_label(content_type)} extension is not valid for {content_type}",
            rule="extension",
        )

    size = metadata.size
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidMetadataError("File size must be a positive integer", rule="size")

    limit = size_limit_for(content_type)
    if size > limit:
        limit_mb = limit // _MIB
        raise InvalidMetadataError(
            f"{_label(content_type)} files cannot exceed {limit_mb}MB",
            rule="size_limit",
            limit_mb=limit_mb,
        )


def validate_profile_image(
    metadata: UploadMetadata,
    max_size: int = DEFAULT_PROFILE_IMAGE_MAX_SIZE,
) -> None:
    """Validate a profile image upload: general rules, then image-only and max_size."""
    validate_metadata(metadata)

    if metadata.content_type not in PROFILE_IMAGE_TYPES:
        raise InvalidMetadataError(
            "Only image files can be used as a profile image",
            rule="profile_content_type",
        )

    if metadata.size > max_size:
        limit_mb = max_size // _MIB
        raise InvalidMetadataError(
            f"Profile image cannot exceed {limit_mb}MB",
            rule="profile_size_limit",
            limit_mb=limit_mb,
        )
