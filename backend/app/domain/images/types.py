"""Image records and stored-upload descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional
from uuid import uuid4

from ..entries.types import utcnow

__all__ = ["Image", "ImageLink", "StoredUpload"]


@dataclass(frozen=True)
class StoredUpload:
    """What the upload storage reports back after writing a file."""

    key: str
    path: Path
    original_name: Optional[str]
    content_type: Optional[str]
    size_bytes: int


@dataclass(frozen=True)
class Image:
    """A stored reference to an uploaded file."""

    id: str
    filename: str
    original_name: Optional[str]
    content_type: Optional[str]
    size_bytes: int
    created_at: datetime

    @classmethod
    def from_upload(cls, upload: StoredUpload) -> "Image":
        return cls(
            id=str(uuid4()),
            filename=upload.key,
            original_name=upload.original_name,
            content_type=upload.content_type,
            size_bytes=upload.size_bytes,
            created_at=utcnow(),
        )


@dataclass(frozen=True)
class ImageLink:
    """Public projection of an image: its id and where to fetch it."""

    id: str
    url: str
