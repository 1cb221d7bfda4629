"""Aggregate vote statistics and a raw data dump for troubleshooting."""

from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..db.database import SessionLocal
from ..models.audio import Audio, AudioInfo
from ..models.model import Model, ModelDetail
from ..models.transcription import Transcription, TranscriptionInfo
from ..services.votes import validation_stats

router = APIRouter()
logger = logging.getLogger(__name__)


class AudioStats(BaseModel):
    audio_id: str
    audio_name: str
    language_tag: str | None = None
    total_votes: int
    model_votes: Dict[str, int]


@router.get("/stats", response_model=List[AudioStats])
async def get_stats() -> List[AudioStats]:
    """Votes per audio, broken down by the model of the preferred transcription."""
    db = SessionLocal()
    try:
        return [AudioStats(**row) for row in validation_stats(db)]
    except SQLAlchemyError as exc:
        logger.error("Failed to compute validation stats: %s", exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()


@router.get("/debug")
async def debug_dump() -> dict:
    if not settings.ENABLE_DEBUG_ENDPOINT:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    db = SessionLocal()
    try:
        audios = [AudioInfo.model_validate(a) for a in db.query(Audio).all()]
        models = [ModelDetail.model_validate(m) for m in db.query(Model).all()]
        transcriptions = [TranscriptionInfo.model_validate(t) for t in db.query(Transcription).all()]
    except SQLAlchemyError as exc:
        logger.error("Debug dump failed: %s", exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()
    return {
        "audios": {"count": len(audios), "rows": audios},
        "models": {"count": len(models), "rows": models},
        "transcriptions": {"count": len(transcriptions), "rows": transcriptions},
    }
