"""Image upload domain package."""

from .repository import ImageRepository, InMemoryImageRepository, SqlImageRepository
from .service import UPLOADS_URL_PREFIX, ImageService, build_image_url
from .storage import LocalUploadStorage, generate_storage_key
from .types import Image, ImageLink, StoredUpload

__all__ = [
    "UPLOADS_URL_PREFIX",
    "Image",
    "ImageLink",
    "ImageRepository",
    "ImageService",
    "InMemoryImageRepository",
    "LocalUploadStorage",
    "SqlImageRepository",
    "StoredUpload",
    "build_image_url",
    "generate_storage_key",
]
