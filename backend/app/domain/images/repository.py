"""Persistence adapters for image records."""

from __future__ import annotations

from threading import RLock
from typing import Any, Dict, List, Mapping, Protocol

from sqlalchemy import Table, delete, insert, select
from sqlalchemy.engine import Engine

from ...infra.db import images_table
from ..errors import NotFoundError, StorageError, sql_storage_errors
from ..entries.types import as_utc
from .types import Image

__all__ = ["ImageRepository", "InMemoryImageRepository", "SqlImageRepository"]


class ImageRepository(Protocol):  # pragma: no cover - interface only
    """Persistence abstraction consumed by :class:`ImageService`."""

    def create(self, image: Image) -> Image: ...

    def list(self) -> List[Image]: ...

    def get(self, image_id: str) -> Image: ...

    def delete(self, image_id: str) -> Image: ...


class InMemoryImageRepository(ImageRepository):
    """Dict-backed adapter used for tests and local development."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._images: Dict[str, Image] = {}

    def create(self, image: Image) -> Image:
        with self._lock:
            self._images[image.id] = image
        return image

    def list(self) -> List[Image]:
        with self._lock:
            return list(self._images.values())

    def get(self, image_id: str) -> Image:
        with self._lock:
            image = self._images.get(image_id)
        if image is None:
            raise NotFoundError.for_record("image", image_id)
        return image

    def delete(self, image_id: str) -> Image:
        with self._lock:
            image = self._images.pop(image_id, None)
        if image is None:
            raise NotFoundError.for_record("image", image_id)
        return image


class SqlImageRepository(ImageRepository):
    """SQLAlchemy-backed adapter for the ``images`` table."""

    def __init__(self, engine: Engine, *, table: Table | None = None) -> None:
        self._engine = engine
        self._images = table if table is not None else images_table

    def create(self, image: Image) -> Image:
        stmt = (
            insert(self._images)
            .values(
                id=image.id,
                filename=image.filename,
                original_name=image.original_name,
                content_type=image.content_type,
                size_bytes=image.size_bytes,
                created_at=image.created_at,
            )
            .returning(self._images)
        )
        with sql_storage_errors("images", "create", image.id):
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        if row is None:  # pragma: no cover
            raise StorageError("failed to insert image", details={"id": image.id})
        return _row_to_image(row)

    def list(self) -> List[Image]:
        stmt = select(self._images).order_by(
            self._images.c.created_at, self._images.c.id
        )
        with sql_storage_errors("images", "list"):
            with self._engine.begin() as conn:
                rows = conn.execute(stmt).mappings().all()
        return [_row_to_image(row) for row in rows]

    def get(self, image_id: str) -> Image:
        stmt = select(self._images).where(self._images.c.id == image_id)
        with sql_storage_errors("images", "get", image_id):
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NotFoundError.for_record("image", image_id)
        return _row_to_image(row)

    def delete(self, image_id: str) -> Image:
        stmt = (
            delete(self._images)
            .where(self._images.c.id == image_id)
            .returning(self._images)
        )
        with sql_storage_errors("images", "delete", image_id):
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NotFoundError.for_record("image", image_id)
        return _row_to_image(row)


def _row_to_image(row: Mapping[str, Any]) -> Image:
    return Image(
        id=row["id"],
        filename=row["filename"],
        original_name=row.get("original_name"),
        content_type=row.get("content_type"),
        size_bytes=int(row.get("size_bytes") or 0),
        created_at=as_utc(row["created_at"]),
    )
