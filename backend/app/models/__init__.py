# Namespace for Pydantic & ORM models.
from .audio import Audio, AudioInfo
from .feedback import Feedback, FeedbackInfo
from .model import Model, ModelInfo
from .transcription import Transcription, TranscriptionInfo

__all__ = [
    "Audio",
    "AudioInfo",
    "Feedback",
    "FeedbackInfo",
    "Model",
    "ModelInfo",
    "Transcription",
    "TranscriptionInfo",
]
