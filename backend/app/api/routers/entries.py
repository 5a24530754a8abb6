"""Contact entry endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Path

from ...api.dependencies import get_dispatcher, get_entry_service
from ...api.schemas import (
    EntryCreatedResponse,
    EntryDeletedResponse,
    EntryListResponse,
    EntryPayload,
    EntryRecord,
    EntryResponse,
)
from ...domain.entries import EntryService
from ...domain.notifications import ConfirmationDispatcher, deliver_confirmation
from ...infra.logging import get_logger

router = APIRouter(prefix="/api", tags=["entries"])
logger = get_logger(__name__)

EntryId = Annotated[str, Path(..., min_length=1, max_length=64)]


@router.post("/add-entry", response_model=EntryCreatedResponse)
def add_entry(
    payload: EntryPayload,
    background_tasks: BackgroundTasks,
    service: EntryService = Depends(get_entry_service),
    dispatcher: ConfirmationDispatcher = Depends(get_dispatcher),
) -> EntryCreatedResponse:
    """Save a submission, then email the confirmation once the response is sent."""

    entry = service.create(payload.model_dump())
    background_tasks.add_task(deliver_confirmation, dispatcher, entry)
    logger.info("entry_confirmation_scheduled", extra={"entry_id": entry.id})
    return EntryCreatedResponse(
        message="Entry added successfully",
        data=EntryRecord.from_entry(entry),
    )


@router.get("/get-entries", response_model=EntryListResponse)
def get_entries(
    service: EntryService = Depends(get_entry_service),
) -> EntryListResponse:
    return EntryListResponse(
        data=[EntryRecord.from_entry(entry) for entry in service.list()]
    )


@router.put("/update-entry/{entry_id}", response_model=EntryResponse)
def update_entry(
    entry_id: EntryId,
    payload: EntryPayload,
    service: EntryService = Depends(get_entry_service),
) -> EntryResponse:
    entry = service.update(entry_id, payload.model_dump(exclude_none=True))
    return EntryResponse(data=EntryRecord.from_entry(entry))


@router.delete("/delete-entry/{entry_id}", response_model=EntryDeletedResponse)
def delete_entry(
    entry_id: EntryId,
    service: EntryService = Depends(get_entry_service),
) -> EntryDeletedResponse:
    service.delete(entry_id)
    return EntryDeletedResponse(message="Entry deleted successfully")
