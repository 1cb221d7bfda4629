"""ORM model and API schema for uploaded recordings."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models._common import new_id, utcnow


class Audio(Base):
    """
    Represents an uploaded audio recording awaiting (or done with) review.

    The blob itself lives in the storage bucket under ``storage_path``; the
    row keeps the public URL the player streams from, plus the metadata
    captured at upload time.
    """
    __tablename__ = "audios"

    id = Column(String(36), primary_key=True, default=new_id, comment="Primary key (UUID string).")
    audio_name = Column(String(255), nullable=False, index=True, comment="Original filename; CSV imports match on it exactly.")
    storage_url = Column(String(1024), nullable=False, comment="URL the audio player streams from.")
    storage_path = Column(String(1024), nullable=False, comment="Object key inside the storage bucket.")
    language_tag = Column(String(50), nullable=True, comment="Language of the recording (e.g. 'pashto').")
    duration_seconds = Column(Float, nullable=True, comment="Duration, when known.")
    file_size_bytes = Column(Integer, nullable=True, comment="Size of the stored blob in bytes.")
    mime_type = Column(String(255), nullable=True, comment="MIME type reported by the uploader.")
    is_validated = Column(Boolean, nullable=False, default=False, comment="Set once a reviewer has signed off the recording.")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    transcriptions = relationship("Transcription", back_populates="audio", passive_deletes=True)


class AudioInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    audio_name: str
    storage_url: str
    storage_path: str
    language_tag: Optional[str] = None
    duration_seconds: Optional[float] = None
    file_size_bytes: Optional[int] = None
    mime_type: Optional[str] = None
    is_validated: bool = False
    created_at: datetime
    updated_at: datetime
