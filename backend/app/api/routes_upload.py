"""Audio upload and listing endpoints.

1. `POST /upload` – multipart/form-data with one or more ``files``.
2. `GET  /upload` – every uploaded audio, newest first.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.database import SessionLocal
from ..models.audio import Audio, AudioInfo
from ..services.uploads import store_audio_files

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("")
async def upload_audio(files: Optional[List[UploadFile]] = File(None)) -> dict:
    """Upload audio files; each one succeeds or fails on its own."""
    if not files:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files provided")

    logger.info("Received upload of %d file(s): %s", len(files), [f.filename for f in files])
    db: Session = SessionLocal()
    try:
        report = await store_audio_files(db, files)
    finally:
        db.close()

    logger.info("Upload finished: %d succeeded, %d failed", len(report.success), len(report.failed))
    return {
        "message": f"Uploaded {len(report.success)} of {len(files)} files",
        "results": report.as_dict(),
    }


@router.get("")
async def list_audios() -> dict:
    db = SessionLocal()
    try:
        audios = db.query(Audio).order_by(Audio.created_at.desc()).all()
        return {"audios": [AudioInfo.model_validate(a) for a in audios]}
    except SQLAlchemyError as exc:
        logger.error("Failed to list audios: %s", exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()
