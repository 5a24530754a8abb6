"""Image service coordinating upload storage and image records."""

from __future__ import annotations

from typing import BinaryIO, List, Optional
from urllib.parse import quote

from ...infra.logging import get_logger
from ...infra.metrics import InMemoryMetricsClient, MetricsClient, safe_increment
from ..errors import StorageError, ValidationError
from .repository import ImageRepository, InMemoryImageRepository
from .storage import LocalUploadStorage
from .types import Image, ImageLink

logger = get_logger(__name__)

UPLOADS_URL_PREFIX = "/uploads"


class ImageService:
    """Keeps the uploads directory and the ``images`` records in step."""

    def __init__(
        self,
        *,
        storage: LocalUploadStorage,
        repository: ImageRepository | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._storage = storage
        self._repository = repository or InMemoryImageRepository()
        self._metrics = metrics or InMemoryMetricsClient()

    def upload(
        self,
        stream: BinaryIO,
        *,
        original_name: Optional[str],
        content_type: Optional[str],
    ) -> Image:
        stored = self._storage.save(
            stream,
            original_name=original_name,
            content_type=content_type,
        )
        if stored.size_bytes == 0:
            self._discard_file(stored.key)
            logger.warning(
                "image_upload_rejected_empty",
                extra={"original_name": original_name},
            )
            raise ValidationError(
                "Uploaded file is empty",
                details={"field": "file"},
            )
        try:
            image = self._repository.create(Image.from_upload(stored))
        except StorageError:
            # Record write failed: drop the orphaned file before propagating.
            self._discard_file(stored.key)
            raise
        safe_increment(self._metrics, "images_uploaded_total")
        logger.info(
            "image_uploaded",
            extra={
                "image_id": image.id,
                "storage_key": image.filename,
                "size_bytes": image.size_bytes,
            },
        )
        return image

    def list(self) -> List[Image]:
        return self._repository.list()

    def list_links(self, base_url: str) -> List[ImageLink]:
        """Project every image to ``{id, url}`` under ``base_url``."""

        return [
            ImageLink(id=image.id, url=build_image_url(base_url, image.filename))
            for image in self._repository.list()
        ]

    def get(self, image_id: str) -> Image:
        return self._repository.get(image_id)

    def delete(self, image_id: str) -> Image:
        image = self._repository.get(image_id)
        self._discard_file(image.filename, image_id=image.id)
        removed = self._repository.delete(image_id)
        safe_increment(self._metrics, "images_deleted_total")
        logger.info(
            "image_deleted",
            extra={"image_id": image_id, "storage_key": image.filename},
        )
        return removed

    def _discard_file(self, key: str, *, image_id: str | None = None) -> None:
        """Best-effort file removal; failures are logged, never raised."""

        try:
            removed = self._storage.delete(key)
        except StorageError:
            safe_increment(self._metrics, "image_file_delete_failed_total")
            logger.warning(
                "image_file_delete_failed",
                exc_info=True,
                extra={"image_id": image_id, "storage_key": key},
            )
            return
        if not removed:
            logger.warning(
                "image_file_already_missing",
                extra={"image_id": image_id, "storage_key": key},
            )


def build_image_url(base_url: str, filename: str) -> str:
    return f"{base_url.rstrip('/')}{UPLOADS_URL_PREFIX}/{quote(filename)}"
