"""Router exports for FastAPI composition."""

from . import entries, gallery, health, images, uploads

__all__ = ["entries", "gallery", "health", "images", "uploads"]
