"""Presigned upload/download issuance and file deletion.

Upload:   validate -> name + key -> persist record -> sign PUT
Access:   lookup -> access check -> content disposition -> sign GET
Delete:   lookup -> ownership -> object delete (best effort) -> record delete

The record is written before the PUT URL is handed out, so a record without
an object is a normal transient state (the client may never upload).
Object deletes are best effort: the record store decides whether a file
exists to the application, and a failed object delete is logged and left
for out-of-band reconciliation.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from urllib.parse import quote_plus

from src.files.metrics import (
    ACCESS_DENIED,
    BACKING_STORE_DELETE_FAILURES,
    PRESIGNED_URLS_ISSUED,
)
from src.files.naming import (
    build_object_key,
    generate_safe_name,
    normalize_original_filename,
    stored_name_from_key,
)
from src.files.validation import validate_metadata
from src.shared.errors import (
    AuthorizationError,
    BackingStoreError,
    NotFoundError,
    UnsupportedPreviewError,
)
from src.shared.logging.error_handler import log_structured_error
from src.shared.types import (
    AccessGrant,
    FileCategory,
    FileOperation,
    FileRecord,
    UploadGrant,
    UploadMetadata,
)

if TYPE_CHECKING:
    from src.files.access import AccessEvaluator
    from src.files.settings import FileServiceSettings
    from src.ports.file_record_port import FileRecordPort
    from src.ports.object_storage_port import ObjectStoragePort

logger = logging.getLogger(__name__)


def encode_header_filename(name: str) -> str:
    """RFC 5987 percent-encoding; spaces become %20, never '+'."""
    return quote_plus(name, safe="").replace("+", "%20")


def build_content_disposition(original_name: str, *, inline: bool) -> str:
    """Content-Disposition bound into a signed GET.

    Inline responses also carry the plain ``filename`` parameter for clients
    that ignore ``filename*``. Backslashes and double quotes in it are
    escaped so the quoted-string stays well formed.
    """
    encoded = encode_header_filename(original_name)
    if inline:
        quoted = original_name.replace("\\", "\\\\").replace('"', '\\"')
        return f"inline; filename=\"{quoted}\"; filename*=UTF-8''{encoded}"
    return f"attachment; filename*=UTF-8''{encoded}"


class PresignedFileService:
    """Issues presigned URLs for stored files and deletes them."""

    def __init__(
        self,
        *,
        records: FileRecordPort,
        storage: ObjectStoragePort,
        access: AccessEvaluator,
        settings: FileServiceSettings,
    ) -> None:
        self._records = records
        self._storage = storage
        self._access = access
        self._settings = settings

    async def request_upload(
        self,
        metadata: UploadMetadata,
        uploader_id: str,
        category: FileCategory,
    ) -> UploadGrant:
        """Validate metadata, persist a FileRecord and sign a PUT for it.

        Raises:
            InvalidMetadataError: Metadata violates the upload policy.
            SignerError: The object store client could not sign the request.
        """
        validate_metadata(metadata)

        stored_name = generate_safe_name(metadata.original_filename)
        object_key = build_object_key(
            self._settings.key_prefix,
            category,
            uploader_id,
            stored_name,
        )
        record = await self._records.create(
            FileRecord(
                file_id="",
                stored_name=stored_name,
                original_name=normalize_original_filename(metadata.original_filename),
                mime_type=metadata.content_type,
                size_bytes=metadata.size,
                object_key=object_key,
                uploader_id=uploader_id,
                category=category,
                uploaded_at=datetime.now(UTC),
            )
        )

        presigned = await self._storage.generate_upload_url(
            self._settings.bucket,
            object_key,
            metadata.content_type,
            expires_in=self._settings.presign_expiry_seconds,
        )
        PRESIGNED_URLS_ISSUED.labels(operation="upload", category=category.value).inc()

        logger.info(
            "Upload URL issued file_id=%s stored_name=%s uploader=%s category=%s",
            record.file_id,
            stored_name,
            uploader_id,
            category.value,
        )

        return UploadGrant(
            url=presigned.url,
            headers={"Content-Type": metadata.content_type},
            expires_at=presigned.expires_at,
            record=record,
        )

    async def request_access(
        self,
        stored_name: str,
        requester_id: str,
        *,
        inline: bool,
    ) -> AccessGrant:
        """Sign a GET for a stored file after checking read access.

        Raises:
            NotFoundError: File, message link or room is missing.
            AuthorizationError: Requester may not read the file.
            UnsupportedPreviewError: ``inline`` for a non-previewable type.
            SignerError: The object store client could not sign the request.
        """
        record = await self._records.get_by_stored_name(stored_name)
        if record is None:
            raise NotFoundError("file", stored_name)

        decision = await self._access.can_access(record, requester_id, FileOperation.READ)
        if not decision.allowed:
            ACCESS_DENIED.labels(operation="read", category=record.category.value).inc()
            logger.info(
                "File access denied stored_name=%s requester=%s reason=%s",
                stored_name,
                requester_id,
                decision.reason,
            )
            raise AuthorizationError(decision.reason)

        if inline and not record.is_previewable:
            raise UnsupportedPreviewError(record.mime_type)

        disposition = build_content_disposition(record.original_name, inline=inline)
        presigned = await self._storage.generate_download_url(
            self._settings.bucket,
            record.object_key,
            response_content_type=record.mime_type,
            response_content_disposition=disposition,
            expires_in=self._settings.presign_expiry_seconds,
        )
        PRESIGNED_URLS_ISSUED.labels(
            operation="view" if inline else "download",
            category=record.category.value,
        ).inc()

        return AccessGrant(
            url=presigned.url,
            headers={"Content-Type": record.mime_type},
            expires_at=presigned.expires_at,
            filename=record.stored_name,
            content_type=record.mime_type,
            inline=inline,
        )

    async def delete_owned(self, file_id: str, requester_id: str) -> bool:
        """Delete a file on behalf of its uploader.

        Raises:
            NotFoundError: No record with this id.
            AuthorizationError: Requester is not the uploader.
        """
        record = await self._records.get_by_id(file_id)
        if record is None:
            raise NotFoundError("file", file_id)

        decision = await self._access.can_access(record, requester_id, FileOperation.DELETE)
        if not decision.allowed:
            ACCESS_DENIED.labels(operation="delete", category=record.category.value).inc()
            raise AuthorizationError(decision.reason)

        await self._delete_object_best_effort(record.object_key)
        await self._records.delete(record.file_id)

        logger.info("File deleted file_id=%s requester=%s", file_id, requester_id)
        return True

    async def delete_by_key(self, object_key: str) -> bool:
        """Delete a file by object key for cascades (message/room deletion).

        Ownership is not re-checked; the caller already decided. A missing
        record is not an error.
        """
        if not object_key or not object_key.strip():
            return False

        record = await self._records.get_by_stored_name(stored_name_from_key(object_key))
        if record is not None:
            await self._records.delete(record.file_id)

        await self._delete_object_best_effort(object_key)

        logger.info(
            "File deleted by key object_key=%s had_record=%s", object_key, record is not None
        )
        return True

    async def _delete_object_best_effort(self, object_key: str) -> None:
        try:
            await self._storage.delete_object(self._settings.bucket, object_key)
        except BackingStoreError as exc:
            BACKING_STORE_DELETE_FAILURES.inc()
            log_structured_error(
                logger,
                exc,
                context={"bucket": self._settings.bucket, "object_key": object_key},
                level=logging.WARNING,
            )
