"""Audio detail endpoints.

1. `GET   /audio/{id}` – the audio, its transcriptions (with model) and vote tallies.
2. `PATCH /audio/{id}` – flip the validated flag.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from ..db.database import SessionLocal
from ..models.audio import Audio, AudioInfo
from ..models.model import Model
from ..models.transcription import Transcription, TranscriptionWithModel
from ..services.votes import tally_for_audio

router = APIRouter()
logger = logging.getLogger(__name__)


class ValidationFlag(BaseModel):
    is_validated: Optional[bool] = None


@router.get("/{audio_id}")
async def get_audio(audio_id: str, response: Response) -> dict:
    """Return an audio with its transcriptions and freshly computed vote counts."""
    db = SessionLocal()
    try:
        audio = db.query(Audio).filter(Audio.id == audio_id).first()
        if not audio:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audio not found")

        transcriptions = (
            db.query(Transcription)
            .options(joinedload(Transcription.model))
            .join(Model, Transcription.model_id == Model.id)
            .filter(Transcription.audio_id == audio_id)
            .order_by(Model.model_name)
            .all()
        )
        tally = tally_for_audio(db, audio_id, [t.id for t in transcriptions])

        response.headers["Cache-Control"] = "no-store, max-age=0"
        return {
            "audio": AudioInfo.model_validate(audio),
            "transcriptions": [TranscriptionWithModel.model_validate(t) for t in transcriptions],
            **tally,
        }
    except HTTPException:
        raise
    except SQLAlchemyError as exc:
        logger.error("Failed to fetch audio %s: %s", audio_id, exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()


@router.patch("/{audio_id}", response_model=AudioInfo)
async def set_validated(audio_id: str, payload: ValidationFlag) -> AudioInfo:
    if payload.is_validated is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="is_validated is required")

    db = SessionLocal()
    try:
        audio = db.query(Audio).filter(Audio.id == audio_id).first()
        if not audio:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audio not found")
        audio.is_validated = payload.is_validated
        db.commit()
        db.refresh(audio)
        logger.info("Audio %s validated=%s", audio_id, audio.is_validated)
        return AudioInfo.model_validate(audio)
    except HTTPException:
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to update audio %s: %s", audio_id, exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()
