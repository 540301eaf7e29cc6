"""Prometheus counters for presigned access.

Exposed through the gateway's /metrics endpoint.
"""

from __future__ import annotations

from prometheus_client import Counter

PRESIGNED_URLS_ISSUED = Counter(
    "chat_files_presigned_urls_total",
    "Presigned URLs issued",
    ["operation", "category"],
)

ACCESS_DENIED = Counter(
    "chat_files_access_denied_total",
    "File access requests denied by policy",
    ["operation", "category"],
)

BACKING_STORE_DELETE_FAILURES = Counter(
    "chat_files_backing_store_delete_failures_total",
    "Object deletions that failed and were skipped",
)
