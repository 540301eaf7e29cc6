"""Object storage settings for the file service.

Values come from the environment and are only checked for presence and
format; anything else about the bucket (region, existence, policy) is the
object store's business.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from src.files.validation import DEFAULT_PROFILE_IMAGE_MAX_SIZE

DEFAULT_KEY_PREFIX: Final = "uploads"
DEFAULT_PRESIGN_EXPIRY_SECONDS: Final = 900
# SigV4 presigned URLs cannot outlive 7 days
MAX_PRESIGN_EXPIRY_SECONDS: Final = 7 * 24 * 3600


@dataclass(frozen=True)
class FileServiceSettings:
    """Bucket, key layout and expiry configuration."""

    bucket: str
    key_prefix: str = DEFAULT_KEY_PREFIX
    presign_expiry_seconds: int = DEFAULT_PRESIGN_EXPIRY_SECONDS
    profile_image_max_size: int = DEFAULT_PROFILE_IMAGE_MAX_SIZE

    def __post_init__(self) -> None:
        if not self.bucket or not self.bucket.strip():
            msg = "S3 bucket name is required"
            raise ValueError(msg)
        if self.key_prefix.startswith("/"):
            msg = f"Key prefix must not start with '/': {self.key_prefix!r}"
            raise ValueError(msg)
        if not 0 < self.presign_expiry_seconds <= MAX_PRESIGN_EXPIRY_SECONDS:
            msg = (
                "Presign expiry must be between 1 and "
                f"{MAX_PRESIGN_EXPIRY_SECONDS} seconds, got {self.presign_expiry_seconds}"
            )
            raise ValueError(msg)
        if self.profile_image_max_size <= 0:
            msg = f"Profile image max size must be positive, got {self.profile_image_max_size}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> FileServiceSettings:
        """Build settings from S3_* / PROFILE_IMAGE_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            bucket=env.get("S3_BUCKET", ""),
            key_prefix=env.get("S3_KEY_PREFIX", DEFAULT_KEY_PREFIX),
            presign_expiry_seconds=_int_var(
                env, "S3_PRESIGN_EXPIRY_SECONDS", DEFAULT_PRESIGN_EXPIRY_SECONDS
            ),
            profile_image_max_size=_int_var(
                env, "PROFILE_IMAGE_MAX_SIZE", DEFAULT_PROFILE_IMAGE_MAX_SIZE
            ),
        )


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from exc
