"""Create files, messages, rooms and users tables.

``files`` is owned by the chat files service. ``messages``, ``rooms`` and
``users`` carry only the columns this service reads or writes; the chat and
account components extend them in their own migrations.

Revision ID: 001_file_tables
Revises:
Create Date: 2026-10-19

Rollback: alembic downgrade -1
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "001_file_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "files",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("original_name", sa.String(1024), nullable=False),
        sa.Column("mime_type", sa.String(255), nullable=False),
        sa.Column("size_bytes", sa.BigInteger, nullable=False),
        sa.Column("object_key", sa.String(1024), nullable=False),
        sa.Column("uploader_id", sa.String(64), nullable=False),
        sa.Column("category", sa.String(16), nullable=False),
        sa.Column(
            "uploaded_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("category IN ('CHAT', 'PROFILE')", name="ck_files_category"),
        sa.CheckConstraint("size_bytes > 0", name="ck_files_size_positive"),
    )
    op.create_index("ix_files_filename", "files", ["filename"], unique=True)
    op.create_index("ix_files_uploader_category", "files", ["uploader_id", "category"])

    op.create_table(
        "messages",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("room_id", sa.String(64), nullable=False),
        sa.Column("file_id", sa.String(64), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    op.create_index("ix_messages_file_id", "messages", ["file_id"])

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("participant_ids", sa.JSON, nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("profile_image", sa.String(255), server_default="", nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_table("rooms")
    op.drop_index("ix_messages_file_id", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_files_uploader_category", table_name="files")
    op.drop_index("ix_files_filename", table_name="files")
    op.drop_table("files")
