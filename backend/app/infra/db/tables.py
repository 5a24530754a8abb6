"""SQLAlchemy Core table definitions mirrored by the Alembic migrations."""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, DateTime, Index, MetaData, String, Table, Text

METADATA = MetaData()

entries_table = Table(
    "entries",
    METADATA,
    Column("id", String(36), primary_key=True),
    Column("name", Text, nullable=False),
    Column("phone", Text, nullable=False),
    Column("email", Text, nullable=False),
    Column("place", Text, nullable=False),
    Column("message", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_entries_created_at", "created_at"),
)

images_table = Table(
    "images",
    METADATA,
    Column("id", String(36), primary_key=True),
    Column("filename", String(255), nullable=False, unique=True),
    Column("original_name", Text, nullable=True),
    Column("content_type", String(255), nullable=True),
    Column("size_bytes", BigInteger, nullable=False, default=0, server_default="0"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_images_created_at", "created_at"),
)
