"""Vote tallies derived from feedback rows on every read."""

import math
from collections import Counter
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.audio import Audio
from app.models.feedback import Feedback
from app.models.model import Model
from app.models.transcription import Transcription


def count_votes(preferred_ids: Iterable[Optional[str]]) -> Dict[str, int]:
    """Count feedback rows per preferred transcription, ignoring comment-only rows."""
    return dict(Counter(pid for pid in preferred_ids if pid))


def vote_percentage(count: int, total: int) -> int:
    """Whole-number share of ``total``, halves rounded up; 0 when nobody voted."""
    if total <= 0:
        return 0
    return int(math.floor(count * 100 / total + 0.5))


def tally_for_audio(db: Session, audio_id: str, transcription_ids: List[str]) -> dict:
    preferred_ids = [
        row.preferred_transcription_id
        for row in db.query(Feedback.preferred_transcription_id).filter(Feedback.audio_id == audio_id).all()
    ]
    total = len(preferred_ids)
    counts = count_votes(preferred_ids)
    percentages = {tid: vote_percentage(counts.get(tid, 0), total) for tid in transcription_ids}
    return {"voteCounts": counts, "votePercentages": percentages, "totalVotes": total}


def validation_stats(db: Session) -> List[dict]:
    """Per-audio vote totals broken down by model name."""
    totals = dict(
        db.query(Feedback.audio_id, func.count(Feedback.id)).group_by(Feedback.audio_id).all()
    )
    per_model: Dict[str, Dict[str, int]] = {}
    rows = (
        db.query(Feedback.audio_id, Model.model_name, func.count(Feedback.id))
        .join(Transcription, Feedback.preferred_transcription_id == Transcription.id)
        .join(Model, Transcription.model_id == Model.id)
        .group_by(Feedback.audio_id, Model.model_name)
        .all()
    )
    for audio_id, model_name, votes in rows:
        per_model.setdefault(audio_id, {})[model_name] = votes

    return [
        {
            "audio_id": audio.id,
            "audio_name": audio.audio_name,
            "language_tag": audio.language_tag,
            "total_votes": totals.get(audio.id, 0),
            "model_votes": per_model.get(audio.id, {}),
        }
        for audio in db.query(Audio).order_by(Audio.audio_name).all()
    ]
