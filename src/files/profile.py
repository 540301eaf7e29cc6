"""Profile image lookup, upload and removal.

A user has at most one profile image. Uploading a new one deletes the
previous record and object first; cleanup failures never block the new
upload.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.files.validation import validate_profile_image
from src.shared.errors import ChatFilesError, NotFoundError
from src.shared.types import FileCategory

if TYPE_CHECKING:
    from src.files.service import PresignedFileService
    from src.ports.file_record_port import FileRecordPort
    from src.ports.user_profile_port import UserProfilePort
    from src.shared.types import UploadGrant, UploadMetadata

logger = logging.getLogger(__name__)


class ProfileImageService:
    """Owner-only profile images on top of PresignedFileService."""

    def __init__(
        self,
        *,
        files: PresignedFileService,
        records: FileRecordPort,
        profiles: UserProfilePort,
        max_size: int,
    ) -> None:
        self._files = files
        self._records = records
        self._profiles = profiles
        self._max_size = max_size

    async def get_profile_image(self, user_id: str) -> str | None:
        """Stored filename of the user's current profile image, or None.

        Raises:
            NotFoundError: The user does not exist.
        """
        await self._require_user(user_id)
        return await self._profiles.get_profile_image(user_id)

    async def upload_profile_image(
        self,
        user_id: str,
        metadata: UploadMetadata,
    ) -> UploadGrant:
        """Replace the user's profile image with a new pending upload.

        Nothing is written or signed unless the user exists and the
        metadata passes the profile image rules.

        Raises:
            InvalidMetadataError: Not an accepted image, or too large.
            NotFoundError: The user does not exist.
        """
        validate_profile_image(metadata, self._max_size)
        await self._require_user(user_id)

        await self._discard_current(user_id, await self._profiles.get_profile_image(user_id))

        grant = await self._files.request_upload(metadata, user_id, FileCategory.PROFILE)
        await self._profiles.set_profile_image(user_id, grant.record.stored_name)

        logger.info(
            "Profile image upload URL issued user_id=%s stored_name=%s",
            user_id,
            grant.record.stored_name,
        )
        return grant

    async def remove_profile_image(self, user_id: str) -> bool:
        """Delete the user's profile image. False if none was set.

        Raises:
            NotFoundError: The user does not exist.
        """
        current = await self.get_profile_image(user_id)
        if not current:
            return False

        await self._discard_current(user_id, current)
        await self._profiles.set_profile_image(user_id, "")
        logger.info("Profile image removed user_id=%s", user_id)
        return True

    async def _require_user(self, user_id: str) -> None:
        if not await self._profiles.exists(user_id):
            raise NotFoundError("user", user_id)

    async def _discard_current(self, user_id: str, current: str | None) -> None:
        if not current:
            return

        record = await self._records.get_by_stored_name(current)
        if record is None:
            return

        try:
            await self._files.delete_owned(record.file_id, user_id)
        except ChatFilesError as exc:
            logger.warning(
                "Previous profile image cleanup failed user_id=%s stored_name=%s: %s",
                user_id,
                current,
                exc,
            )
