"""Reviewer votes and comments."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from app.db.base import Base
from app.models._common import new_id, utcnow


class Feedback(Base):
    """
    One reviewer's recorded preference for an audio, with optional comments.

    Rows are append-only.  Tallies are computed on read by grouping on
    ``preferred_transcription_id``; nothing stops one session from voting
    repeatedly, and nothing checks that the preferred transcription belongs
    to ``audio_id``.
    """
    __tablename__ = "feedback"

    id = Column(String(36), primary_key=True, default=new_id)
    audio_id = Column(String(36), ForeignKey("audios.id", ondelete="CASCADE"), nullable=False, index=True)
    preferred_transcription_id = Column(
        String(36),
        ForeignKey("transcriptions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_comments = Column(Text, nullable=True)
    user_identifier = Column(String(255), nullable=True)
    session_id = Column(String(64), nullable=True, index=True, comment="Anonymous reviewer session from the cookie.")
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class FeedbackInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    audio_id: str
    preferred_transcription_id: Optional[str] = None
    user_comments: Optional[str] = None
    user_identifier: Optional[str] = None
    session_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
