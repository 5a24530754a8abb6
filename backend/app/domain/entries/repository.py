"""Persistence adapters for contact entries."""

from __future__ import annotations

from threading import RLock
from typing import Any, Dict, List, Mapping, Protocol

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.engine import Engine

from ...infra.db import entries_table
from ..errors import NotFoundError, StorageError, sql_storage_errors
from .types import Entry, as_utc, utcnow

__all__ = ["EntryRepository", "InMemoryEntryRepository", "SqlEntryRepository"]


class EntryRepository(Protocol):  # pragma: no cover - interface only
    """Persistence abstraction consumed by :class:`EntryService`."""

    def create(self, entry: Entry) -> Entry: ...

    def list(self) -> List[Entry]: ...

    def get(self, entry_id: str) -> Entry: ...

    def update(self, entry_id: str, changes: Dict[str, str]) -> Entry: ...

    def delete(self, entry_id: str) -> Entry: ...


class InMemoryEntryRepository(EntryRepository):
    """Dict-backed adapter used for tests and local development."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: Dict[str, Entry] = {}

    def create(self, entry: Entry) -> Entry:
        with self._lock:
            self._entries[entry.id] = entry
        return entry

    def list(self) -> List[Entry]:
        with self._lock:
            return list(self._entries.values())

    def get(self, entry_id: str) -> Entry:
        with self._lock:
            entry = self._entries.get(entry_id)
        if entry is None:
            raise NotFoundError.for_record("entry", entry_id)
        return entry

    def update(self, entry_id: str, changes: Dict[str, str]) -> Entry:
        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None:
                raise NotFoundError.for_record("entry", entry_id)
            updated = entry.with_changes(changes)
            self._entries[entry_id] = updated
        return updated

    def delete(self, entry_id: str) -> Entry:
        with self._lock:
            entry = self._entries.pop(entry_id, None)
        if entry is None:
            raise NotFoundError.for_record("entry", entry_id)
        return entry


class SqlEntryRepository(EntryRepository):
    """SQLAlchemy-backed adapter for the ``entries`` table."""

    def __init__(self, engine: Engine, *, table: Table | None = None) -> None:
        self._engine = engine
        self._entries = table if table is not None else entries_table

    def create(self, entry: Entry) -> Entry:
        stmt = (
            insert(self._entries)
            .values(
                id=entry.id,
                name=entry.name,
                phone=entry.phone,
                email=entry.email,
                place=entry.place,
                message=entry.message,
                created_at=entry.created_at,
                updated_at=entry.updated_at,
            )
            .returning(self._entries)
        )
        with sql_storage_errors("entries", "create", entry.id):
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        if row is None:  # pragma: no cover
            raise StorageError("failed to insert entry", details={"id": entry.id})
        return _row_to_entry(row)

    def list(self) -> List[Entry]:
        stmt = select(self._entries).order_by(
            self._entries.c.created_at, self._entries.c.id
        )
        with sql_storage_errors("entries", "list"):
            with self._engine.begin() as conn:
                rows = conn.execute(stmt).mappings().all()
        return [_row_to_entry(row) for row in rows]

    def get(self, entry_id: str) -> Entry:
        stmt = select(self._entries).where(self._entries.c.id == entry_id)
        with sql_storage_errors("entries", "get", entry_id):
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NotFoundError.for_record("entry", entry_id)
        return _row_to_entry(row)

    def update(self, entry_id: str, changes: Dict[str, str]) -> Entry:
        values: Dict[str, Any] = dict(changes)
        values["updated_at"] = utcnow()
        stmt = (
            update(self._entries)
            .where(self._entries.c.id == entry_id)
            .values(**values)
            .returning(self._entries)
        )
        with sql_storage_errors("entries", "update", entry_id):
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NotFoundError.for_record("entry", entry_id)
        return _row_to_entry(row)

    def delete(self, entry_id: str) -> Entry:
        stmt = (
            delete(self._entries)
            .where(self._entries.c.id == entry_id)
            .returning(self._entries)
        )
        with sql_storage_errors("entries", "delete", entry_id):
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NotFoundError.for_record("entry", entry_id)
        return _row_to_entry(row)


def _row_to_entry(row: Mapping[str, Any]) -> Entry:
    return Entry(
        id=row["id"],
        name=row["name"],
        phone=row["phone"],
        email=row["email"],
        place=row["place"],
        message=row["message"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )
