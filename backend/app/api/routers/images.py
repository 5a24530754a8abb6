"""Image upload, listing and deletion endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from ...api.dependencies import get_base_url, get_image_service
from ...api.schemas import (
    ImageLinkRecord,
    ImageRecord,
    ImageUploadResponse,
    MessageResponse,
)
from ...domain.images import ImageService
from ...infra.logging import get_logger

router = APIRouter(prefix="/api", tags=["images"])
logger = get_logger(__name__)


@router.post("/upload", response_model=ImageUploadResponse)
def upload_image(
    file: UploadFile = File(...),
    service: ImageService = Depends(get_image_service),
) -> ImageUploadResponse:
    image = service.upload(
        file.file,
        original_name=file.filename,
        content_type=file.content_type,
    )
    return ImageUploadResponse(image=ImageRecord.from_image(image))


@router.get("/images", response_model=List[ImageLinkRecord])
def list_images(
    base_url: str = Depends(get_base_url),
    service: ImageService = Depends(get_image_service),
) -> List[ImageLinkRecord]:
    """Return ``{id, url}`` for every stored image."""

    links = service.list_links(base_url)
    logger.debug("images_listed", extra={"count": len(links)})
    return [ImageLinkRecord.from_link(link) for link in links]


@router.delete("/images/{image_id}", response_model=MessageResponse)
def delete_image(
    image_id: str,
    service: ImageService = Depends(get_image_service),
) -> MessageResponse:
    service.delete(image_id)
    return MessageResponse(message="Image deleted successfully")
