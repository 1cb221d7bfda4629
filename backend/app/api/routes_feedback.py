"""Reviewer feedback: submit a vote, list votes."""

from __future__ import annotations

import logging
import secrets
import string
import time
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..db.database import SessionLocal
from ..models.feedback import Feedback, FeedbackInfo

router = APIRouter()
logger = logging.getLogger(__name__)

_SESSION_ALPHABET = string.ascii_lowercase + string.digits


class FeedbackPayload(BaseModel):
    audioId: Optional[str] = None
    preferredTranscriptionId: Optional[str] = None
    userComments: Optional[str] = None


def new_session_id() -> str:
    """Anonymous reviewer id: ``session_<epoch millis>_<9 base36 chars>``."""
    suffix = "".join(secrets.choice(_SESSION_ALPHABET) for _ in range(9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def client_address(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


@router.post("")
async def submit_feedback(payload: FeedbackPayload, request: Request, response: Response) -> dict:
    """Record a vote and/or comment.  Only the audio id is mandatory."""
    if not payload.audioId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Audio ID is required")

    cookie_session = request.cookies.get(settings.SESSION_COOKIE_NAME)
    session_id = cookie_session or new_session_id()
    comments = (payload.userComments or "").strip() or None

    db = SessionLocal()
    try:
        feedback = Feedback(
            audio_id=payload.audioId,
            preferred_transcription_id=payload.preferredTranscriptionId or None,
            user_comments=comments,
            session_id=session_id,
            ip_address=client_address(request),
            user_agent=request.headers.get("user-agent") or None,
        )
        db.add(feedback)
        db.commit()
        db.refresh(feedback)
        logger.info(
            "Feedback %s for audio %s (preferred=%s, session=%s)",
            feedback.id,
            feedback.audio_id,
            feedback.preferred_transcription_id,
            session_id,
        )
        result = FeedbackInfo.model_validate(feedback)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to store feedback for audio %s: %s", payload.audioId, exc, exc_info=True)
        detail = str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
    finally:
        db.close()

    if not cookie_session:
        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            session_id,
            max_age=settings.SESSION_COOKIE_MAX_AGE,
            httponly=True,
            secure=settings.secure_cookies,
            samesite="lax",
        )
    return {"message": "Feedback submitted successfully", "feedback": result}


@router.get("")
async def list_feedback(audioId: Optional[str] = None) -> dict:
    """List feedback newest first, optionally for one audio."""
    db = SessionLocal()
    try:
        query = db.query(Feedback)
        if audioId:
            query = query.filter(Feedback.audio_id == audioId)
        rows: List[Feedback] = query.order_by(Feedback.created_at.desc()).all()
        return {"feedback": [FeedbackInfo.model_validate(f) for f in rows]}
    except SQLAlchemyError as exc:
        logger.error("Failed to list feedback: %s", exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()
