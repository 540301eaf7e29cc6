"""Structured error logging.

Errors that the service deliberately swallows (object-store deletes) or
turns into a 500 are logged as a single record carrying the error code, the
stack trace, the request id and a redacted context dict, so log aggregation
can group them without parsing messages.
"""

from __future__ import annotations

import logging
import traceback
from dataclasses import asdict, dataclass, field
from typing import Any

from src.shared.request_context import get_request_id


@dataclass(frozen=True)
class StructuredError:
    """Structured representation of an error for logging."""

    error_code: str
    message: str
    stack_trace: str
    context: dict[str, Any] = field(default_factory=dict)
    request_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict suitable for JSON logging."""
        d = asdict(self)
        d["context"] = _redact_sensitive(d["context"])
        return d


# Presigned URLs are bearer capabilities and count as secrets here.
_SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "credential",
        "jwt",
        "secret",
        "signature",
        "token",
        "url",
        "upload_url",
    }
)


def _redact_sensitive(data: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in _SENSITIVE_KEYS:
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = _redact_sensitive(value)
        else:
            result[key] = value
    return result


def create_structured_error(
    exc: Exception,
    *,
    error_code: str = "",
    context: dict[str, Any] | None = None,
) -> StructuredError:
    """Create a StructuredError from an exception.

    The exception's ``.code`` (ChatFilesError subclasses) is used as the
    error code unless overridden; otherwise the class name.
    """
    code = error_code or getattr(exc, "code", type(exc).__name__)
    stack = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return StructuredError(
        error_code=code,
        message=str(exc),
        stack_trace="".join(stack),
        context=context or {},
        request_id=get_request_id(),
    )


def log_structured_error(
    logger: logging.Logger,
    exc: Exception,
    *,
    error_code: str = "",
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> StructuredError:
    """Log an exception as a structured error and return it."""
    structured = create_structured_error(exc, error_code=error_code, context=context)
    logger.log(
        level,
        "structured_error code=%s request_id=%s",
        structured.error_code,
        structured.request_id,
        extra={"structured_error": structured.to_dict()},
    )
    return structured
