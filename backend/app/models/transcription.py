"""Pydantic / ORM models for transcriptions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models._common import new_id, utcnow
from app.models.model import ModelInfo


class Transcription(Base):
    """
    One model's text output for one audio recording.

    At most one row exists per (audio, model) pair; re-importing a CSV for the
    same pair overwrites text and scores in place.
    """
    __tablename__ = "transcriptions"
    __table_args__ = (
        UniqueConstraint("audio_id", "model_id", name="uq_transcriptions_audio_model"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    audio_id = Column(String(36), ForeignKey("audios.id", ondelete="CASCADE"), nullable=False, index=True)
    model_id = Column(String(36), ForeignKey("models.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False, comment="The transcription as imported (trimmed).")
    bleu_score = Column(Float, nullable=True, comment="BLEU score supplied with the import, opaque to us.")
    chrf_score = Column(Float, nullable=True, comment="chrF++ score supplied with the import, opaque to us.")
    word_count = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    audio = relationship("Audio", back_populates="transcriptions")
    model = relationship("Model", back_populates="transcriptions", lazy="joined")


class TranscriptionInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: str
    audio_id: str
    model_id: str
    text: str
    bleu_score: Optional[float] = None
    chrf_score: Optional[float] = None
    word_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class TranscriptionWithModel(TranscriptionInfo):
    model: Optional[ModelInfo] = None
