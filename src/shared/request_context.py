"""Per-request id propagation via contextvars.

The gateway binds a request id on entry; structured error logs read it back
with get_request_id() so a swallowed object-store failure can be tied to the
request that triggered it.
"""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003 -- used at runtime by contextmanager
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Return the current request id (empty string outside a request)."""
    return _request_id.get()


@contextmanager
def request_scope(request_id: str | None = None) -> Generator[str, None, None]:
    """Bind a request id for the duration of the block.

    A missing or blank id is replaced by a fresh hex UUID. The previous value
    is restored on exit.
    """
    effective_id = request_id.strip() if request_id and request_id.strip() else uuid4().hex
    token = _request_id.set(effective_id)
    try:
        yield effective_id
    finally:
        _request_id.reset(token)
