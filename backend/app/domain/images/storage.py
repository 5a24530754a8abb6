"""Local-disk storage for uploaded files.

Every upload is written under a generated key of the form
``<32 hex chars><.ext>``; the client's file name never reaches the
filesystem. Keys are resolved back to paths only when they name a file
directly inside the uploads directory, so ``../`` tricks and nested paths
are refused.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional
from uuid import uuid4

from ...infra.logging import get_logger
from ..errors import NotFoundError, StorageError
from .types import StoredUpload

__all__ = ["LocalUploadStorage", "generate_storage_key"]

logger = get_logger(__name__)

EXTENSION_PATTERN = re.compile(r"^\.[a-z0-9]{1,10}$")
COPY_CHUNK_SIZE = 1024 * 1024


def generate_storage_key(original_name: Optional[str]) -> str:
    """Return a fresh opaque key keeping only a short, safe file extension."""

    suffix = PurePosixPath(_basename(original_name)).suffix.lower()
    extension = suffix if EXTENSION_PATTERN.fullmatch(suffix) else ""
    return f"{uuid4().hex}{extension}"


class LocalUploadStorage:
    """Writes, resolves and removes uploads below a single root directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).expanduser().resolve()

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> Path:
        """Create the uploads directory when missing."""

        self._root.mkdir(parents=True, exist_ok=True)
        return self._root

    def save(
        self,
        stream: BinaryIO,
        *,
        original_name: Optional[str],
        content_type: Optional[str],
    ) -> StoredUpload:
        key = generate_storage_key(original_name)
        path = self._root / key
        try:
            with path.open("xb") as handle:
                shutil.copyfileobj(stream, handle, COPY_CHUNK_SIZE)
            size = path.stat().st_size
        except OSError as exc:
            logger.error(
                "upload_write_failed",
                exc_info=True,
                extra={"storage_key": key, "root": str(self._root)},
            )
            path.unlink(missing_ok=True)
            raise StorageError(
                "Failed to store uploaded file",
                details={"storage_key": key},
            ) from exc
        logger.info(
            "upload_stored",
            extra={"storage_key": key, "size_bytes": size, "content_type": content_type},
        )
        return StoredUpload(
            key=key,
            path=path,
            original_name=_basename(original_name) or None,
            content_type=content_type,
            size_bytes=size,
        )

    def resolve(self, key: str) -> Path:
        """Return the path for ``key``; unknown or escaping keys are not found."""

        path = self._candidate_path(key)
        if path is None or not path.is_file():
            raise NotFoundError.for_record("file", key)
        return path

    def delete(self, key: str) -> bool:
        """Remove the file for ``key``; ``False`` when it was already gone."""

        path = self._candidate_path(key)
        if path is None:
            raise StorageError(
                "Refusing to delete a path outside the uploads directory",
                details={"storage_key": key},
            )
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(
                "Failed to delete uploaded file",
                details={"storage_key": key},
            ) from exc
        logger.info("upload_deleted", extra={"storage_key": key})
        return True

    def _candidate_path(self, key: str) -> Optional[Path]:
        if not key or key in {".", ".."} or "/" in key or "\\" in key or "\x00" in key:
            return None
        path = (self._root / key).resolve()
        if path.parent != self._root:
            return None
        return path


def _basename(name: Optional[str]) -> str:
    if not name:
        return ""
    return PurePosixPath(name.replace("\\", "/")).name
