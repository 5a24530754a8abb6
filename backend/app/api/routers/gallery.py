"""Older image surface kept for clients still calling the gallery routes.

Mounted under ``/api/gallery`` when ``http.legacy_image_routes`` is on. It
shares :class:`ImageService` with the canonical image routes.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from ...api.dependencies import get_image_service
from ...api.schemas import GalleryUploadResponse, ImageRecord, MessageResponse
from ...domain.images import ImageService

router = APIRouter(prefix="/api/gallery", tags=["gallery"])


@router.post("/upload-image", response_model=GalleryUploadResponse)
def upload_image(
    image: UploadFile = File(...),
    service: ImageService = Depends(get_image_service),
) -> GalleryUploadResponse:
    stored = service.upload(
        image.file,
        original_name=image.filename,
        content_type=image.content_type,
    )
    return GalleryUploadResponse(
        message="Image uploaded successfully",
        image=ImageRecord.from_image(stored),
    )


@router.get("/get-image", response_model=List[ImageRecord])
def get_images(service: ImageService = Depends(get_image_service)) -> List[ImageRecord]:
    return [ImageRecord.from_image(image) for image in service.list()]


@router.delete("/delete-image/{image_id}", response_model=MessageResponse)
def delete_image(
    image_id: str,
    service: ImageService = Depends(get_image_service),
) -> MessageResponse:
    service.delete(image_id)
    return MessageResponse(message="Image deleted successfully")
