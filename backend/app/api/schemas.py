"""Wire models shared by the entry and image routers.

Records are serialised with camelCase aliases (``createdAt``,
``originalName``); request bodies accept the plain field names.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.entries import Entry
from ..domain.images import Image, ImageLink


class EntryPayload(BaseModel):
    """Body of ``POST /api/add-entry`` and ``PUT /api/update-entry/{id}``.

    Fields stay optional here so the service reports every missing or blank
    field in one validation error.
    """

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    place: Optional[str] = None
    message: Optional[str] = None


class EntryRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    phone: str
    email: str
    place: str
    message: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryRecord":
        return cls(
            id=entry.id,
            name=entry.name,
            phone=entry.phone,
            email=entry.email,
            place=entry.place,
            message=entry.message,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class EntryCreatedResponse(BaseModel):
    success: bool = True
    message: str
    data: EntryRecord


class EntryResponse(BaseModel):
    success: bool = True
    data: EntryRecord


class EntryListResponse(BaseModel):
    success: bool = True
    data: List[EntryRecord] = Field(default_factory=list)


class EntryDeletedResponse(BaseModel):
    success: bool = True
    message: str


class ImageRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    filename: str
    original_name: Optional[str] = Field(default=None, alias="originalName")
    content_type: Optional[str] = Field(default=None, alias="contentType")
    size_bytes: int = Field(default=0, alias="sizeBytes")
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_image(cls, image: Image) -> "ImageRecord":
        return cls(
            id=image.id,
            filename=image.filename,
            original_name=image.original_name,
            content_type=image.content_type,
            size_bytes=image.size_bytes,
            created_at=image.created_at,
        )


class ImageLinkRecord(BaseModel):
    id: str
    url: str

    @classmethod
    def from_link(cls, link: ImageLink) -> "ImageLinkRecord":
        return cls(id=link.id, url=link.url)


class ImageUploadResponse(BaseModel):
    success: bool = True
    image: ImageRecord


class GalleryUploadResponse(BaseModel):
    message: str
    image: ImageRecord


class MessageResponse(BaseModel):
    message: str
