"""Unified error hierarchy for the chat files service.

All domain errors inherit from ChatFilesError. The gateway maps each type to
an HTTP status; adapters translate third-party exceptions into these types so
that botocore / SQLAlchemy errors never cross a Port boundary.
"""

from __future__ import annotations


class ChatFilesError(Exception):
    """Base error for all chat files exceptions."""

    def __init__(self, message: str, code: str = "CHAT_FILES_ERROR") -> None:
        self.code = code
        super().__init__(message)


# -- Auth errors --


class AuthenticationError(ChatFilesError):
    """Authentication failed (invalid token, expired, etc.)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(ChatFilesError):
    """Access to a stored file was denied."""

    def __init__(self, reason: str = "") -> None:
        msg = f"Permission denied: {reason}" if reason else "Permission denied"
        self.reason = reason
        super().__init__(msg, code="FORBIDDEN")


# -- Domain errors --


class NotFoundError(ChatFilesError):
    """Requested resource not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            code="NOT_FOUND",
        )


class ValidationError(ChatFilesError):
    """Input validation failed."""

    def __init__(self, message: str, field: str = "", code: str = "VALIDATION") -> None:
        self.field = field
        super().__init__(message, code=code)


class InvalidMetadataError(ValidationError):
    """Declared upload metadata violates the file policy.

    ``rule`` names the check that failed; ``limit_mb`` is set for the
    size-limit rules.
    """

    def __init__(self, message: str, *, rule: str, limit_mb: int | None = None) -> None:
        self.rule = rule
        self.limit_mb = limit_mb
        super().__init__(message, field=rule, code="INVALID_METADATA")


class UnsupportedPreviewError(ChatFilesError):
    """Inline view requested for a type that cannot be previewed."""

    def __init__(self, mime_type: str) -> None:
        self.mime_type = mime_type
        super().__init__(
            f"Preview not supported for content type: {mime_type}",
            code="UNSUPPORTED_PREVIEW",
        )


# -- Object store errors (raised by ObjectStoragePort implementations) --


class BackingStoreError(ChatFilesError):
    """Object store operation on a stored object failed."""

    def __init__(self, key: str, message: str = "") -> None:
        self.key = key
        super().__init__(
            message or f"Object store operation failed: {key}",
            code="BACKING_STORE_FAILURE",
        )


class SignerError(ChatFilesError):
    """Presigned URL generation failed."""

    def __init__(self, message: str = "Failed to sign object store request") -> None:
        super().__init__(message, code="SIGNER_FAILURE")


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "BackingStoreError",
    "ChatFilesError",
    "InvalidMetadataError",
    "NotFoundError",
    "SignerError",
    "UnsupportedPreviewError",
    "ValidationError",
]
