"""ObjectStoragePort - Object storage operations interface.

Encapsulates object storage primitives without business logic or
permission checks: request signing and object deletion. File bytes never
pass through this interface.

Underlying implementation: S3 / MinIO (swappable).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.shared.types import PresignedDownloadURL, PresignedUploadURL


class ObjectStoragePort(ABC):
    """Port: Object storage operation primitives.

    - generate_upload_url   (signed PUT)
    - generate_download_url (signed GET with bound response headers)
    - delete_object
    """

    @abstractmethod
    async def generate_upload_url(
        self,
        bucket: str,
        key: str,
        content_type: str,
        expires_in: int = 900,
    ) -> PresignedUploadURL:
        """Generate a presigned URL for object upload.

        Args:
            bucket: Target bucket name.
            key: Object key (path within bucket).
            content_type: Content-Type the uploader must send.
            expires_in: URL expiry in seconds.

        Returns:
            PresignedUploadURL with url, expires_at, and conditions.

        Raises:
            SignerError: If the request could not be signed.
        """

    @abstractmethod
    async def generate_download_url(
        self,
        bucket: str,
        key: str,
        *,
        response_content_type: str,
        response_content_disposition: str,
        expires_in: int = 900,
    ) -> PresignedDownloadURL:
        """Generate a presigned URL for object download.

        The response Content-Type and Content-Disposition are part of the
        signed parameters, so the store serves them regardless of what the
        client sends.

        Raises:
            SignerError: If the request could not be signed.
        """

    @abstractmethod
    async def delete_object(self, bucket: str, key: str) -> None:
        """Delete a single object.

        Raises:
            BackingStoreError: If the store rejected or failed the delete.
        """
