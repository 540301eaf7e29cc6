"""S3/MinIO adapter implementing ObjectStoragePort.

Provides presigned PUT/GET generation and object deletion via the
S3-compatible API (MinIO for dev, AWS S3 for production). botocore
exceptions are translated into SignerError / BackingStoreError here and
never reach the domain layer.
"""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime, timedelta
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.ports.object_storage_port import ObjectStoragePort
from src.shared.errors import BackingStoreError, SignerError
from src.shared.types import PresignedDownloadURL, PresignedUploadURL

logger = logging.getLogger(__name__)

_CONNECT_TIMEOUT_SECONDS = 5
_READ_TIMEOUT_SECONDS = 10
_MAX_ATTEMPTS = 2


class S3Adapter(ObjectStoragePort):
    """ObjectStoragePort implementation using S3/MinIO."""

    def __init__(
        self,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str | None = None,
    ) -> None:
        self._endpoint_url = endpoint_url or os.environ.get("S3_ENDPOINT_URL") or None
        self._access_key = access_key or os.environ.get("AWS_ACCESS_KEY_ID") or None
        self._secret_key = secret_key or os.environ.get("AWS_SECRET_ACCESS_KEY") or None
        self._region = region or os.environ.get("S3_REGION", "us-east-1")
        self._client: Any = None

    def connect(self) -> None:
        """Create the S3 client (synchronous, boto3 is not async).

        Without explicit keys boto3 falls back to its default credential
        chain (env, shared config, instance role).
        """
        self._client = boto3.client(
            "s3",
            endpoint_url=self._endpoint_url,
            aws_access_key_id=self._access_key,
            aws_secret_access_key=self._secret_key,
            region_name=self._region,
            config=Config(
                signature_version="s3v4",
                connect_timeout=_CONNECT_TIMEOUT_SECONDS,
                read_timeout=_READ_TIMEOUT_SECONDS,
                retries={"max_attempts": _MAX_ATTEMPTS, "mode": "standard"},
            ),
        )
        logger.info("S3 adapter connected: %s", self._endpoint_url or "aws")

    @property
    def client(self) -> Any:
        if self._client is None:
            msg = "S3 not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client

    def _sign(self, operation: str, params: dict[str, Any], expires_in: int) -> str:
        try:
            return self.client.generate_presigned_url(
                operation,
                Params=params,
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Presign failed op=%s key=%s: %s", operation, params.get("Key"), exc)
            msg = f"Failed to sign {operation} for {params.get('Key')}"
            raise SignerError(msg) from exc

    async def generate_upload_url(
        self,
        bucket: str,
        key: str,
        content_type: str,
        expires_in: int = 900,
    ) -> PresignedUploadURL:
        """Presigned PUT. Content-Type is signed, so the client must send it verbatim."""
        url = self._sign(
            "put_object",
            {"Bucket": bucket, "Key": key, "ContentType": content_type},
            expires_in,
        )
        return PresignedUploadURL(
            url=url,
            expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
            conditions={"content_type": content_type},
        )

    async def generate_download_url(
        self,
        bucket: str,
        key: str,
        *,
        response_content_type: str,
        response_content_disposition: str,
        expires_in: int = 900,
    ) -> PresignedDownloadURL:
        """Presigned GET with response-content-type/-disposition overrides."""
        url = self._sign(
            "get_object",
            {
                "Bucket": bucket,
                "Key": key,
                "ResponseContentType": response_content_type,
                "ResponseContentDisposition": response_content_disposition,
            },
            expires_in,
        )
        return PresignedDownloadURL(
            url=url,
            expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
        )

    async def delete_object(self, bucket: str, key: str) -> None:
        """Delete a single object (S3 delete is idempotent for missing keys)."""
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise BackingStoreError(key, f"Failed to delete {bucket}/{key}: {exc}") from exc
