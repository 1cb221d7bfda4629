"""Serves stored audio blobs to the player."""

import logging
import mimetypes

from fastapi import APIRouter
from fastapi.responses import FileResponse

from ..exceptions import NotFound
from ..utils import storage

router = APIRouter()
logger = logging.getLogger(__name__)

# Not every platform mimetypes table knows these
_MEDIA_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
}


@router.get("/{storage_path:path}")
async def get_media(storage_path: str) -> FileResponse:
    file_path = storage.resolve_object(storage_path)
    if not file_path.is_file():
        logger.warning("Media object '%s' not found at '%s'", storage_path, file_path)
        raise NotFound("File not found")

    suffix = file_path.suffix.lower()
    media_type = _MEDIA_TYPES.get(suffix) or mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return FileResponse(path=file_path, media_type=media_type)
