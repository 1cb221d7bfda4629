"""Transcription sources (the systems whose outputs reviewers compare)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models._common import new_id, utcnow


class Model(Base):
    """A named transcription-generating source, e.g. one of two competing ASR systems."""

    __tablename__ = "models"

    id = Column(String(36), primary_key=True, default=new_id)
    model_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Rows go away with the model through ON DELETE CASCADE
    transcriptions = relationship("Transcription", back_populates="model", passive_deletes=True)


class ModelInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: str
    model_name: str
    description: Optional[str] = None


class ModelDetail(ModelInfo):
    created_at: datetime
    updated_at: datetime
