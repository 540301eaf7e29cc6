"""Infrastructure layer package.

Implements Port interfaces with concrete adapters (PostgreSQL, S3/MinIO).
Domain services and the gateway MUST NOT import from this package directly;
only PG adapters and the composition root (src.main) do.
"""
