"""Serves stored uploads back to clients."""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from ...api.dependencies import get_upload_storage
from ...domain.images import UPLOADS_URL_PREFIX, LocalUploadStorage

router = APIRouter(prefix=UPLOADS_URL_PREFIX, tags=["uploads"])


@router.get("/{filename}")
def serve_upload(
    filename: str,
    storage: LocalUploadStorage = Depends(get_upload_storage),
) -> FileResponse:
    # Unknown or path-escaping keys raise NotFoundError -> 404 envelope.
    return FileResponse(storage.resolve(filename))
