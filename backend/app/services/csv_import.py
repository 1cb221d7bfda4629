"""Bulk import of model transcriptions from CSV rows.

Rows arrive either as already-parsed dictionaries (the admin UI parses the
file in the browser) or as a raw CSV upload parsed here.  Header names are
matched case-insensitively against a small set of aliases.  Every row is its
own round trip: a failing row is recorded and the import carries on, leaving
earlier rows committed.
"""

import csv
import io
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import NotFound, ValidationFailed
from app.models.audio import Audio
from app.models.model import Model
from app.models.transcription import Transcription

logger = logging.getLogger(__name__)

AUDIO_NAME_COLUMNS = ("audio_name", "audio", "filename")
TRANSCRIPTION_COLUMNS = ("transcription",)
BLEU_COLUMNS = ("bleu", "bleu_score")
CHRF_COLUMNS = ("chrf++", "chrf", "chrf_score")


@dataclass
class ImportResults:
    processed: int = 0
    transcriptions_added: int = 0
    audio_not_found: List[str] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "processed": self.processed,
            "transcriptionsAdded": self.transcriptions_added,
            "audioNotFound": self.audio_not_found,
            "errors": self.errors,
        }


def _lookup(row: Mapping, aliases: Iterable[str]) -> Optional[str]:
    """Return the first non-empty value whose header matches one of ``aliases``."""
    lowered = {str(k).strip().lower(): v for k, v in row.items() if k is not None}
    for alias in aliases:
        value = lowered.get(alias)
        if value is None:
            continue
        value = str(value)
        if value.strip():
            return value
    return None


def parse_score(raw: Optional[str]) -> Optional[float]:
    """Parse an optional metric score; anything that is not a finite number becomes ``None``.

    The whole cell must be numeric: ``"12abc"`` is rejected rather than read
    as ``12`` the way a lenient prefix parse (JavaScript ``parseFloat``) would.
    """
    if raw is None:
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def count_words(text: str) -> int:
    return len(text.split())


def detect_columns(columns: Iterable[str]) -> Dict[str, bool]:
    lowered = {c.strip().lower() for c in columns if c}
    return {
        "audio": any(c in lowered for c in AUDIO_NAME_COLUMNS),
        "transcription": any(c in lowered for c in TRANSCRIPTION_COLUMNS),
    }


def parse_csv(content: bytes) -> Tuple[List[str], List[Dict[str, str]]]:
    """Parse CSV bytes with a header row, skipping blank lines.

    Raises :class:`ValidationFailed` when the payload is not decodable CSV.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValidationFailed(f"CSV file is not valid UTF-8: {exc}") from exc

    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    rows: List[Dict[str, str]] = []
    try:
        for row in reader:
            if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
                continue
            rows.append(row)
    except csv.Error as exc:
        raise ValidationFailed(f"Could not parse CSV (line {reader.line_num}): {exc}") from exc
    return list(reader.fieldnames or []), rows


def find_audio(db: Session, audio_name: str) -> Optional[Audio]:
    """Return the one audio named ``audio_name``.

    ``None`` when nothing matches or when the name is ambiguous (the same
    file uploaded twice); either way the row is reported as not found.
    """
    matches = db.query(Audio).filter(Audio.audio_name == audio_name).limit(2).all()
    if len(matches) > 1:
        logger.warning("Audio name '%s' matches several uploads; skipping row", audio_name)
        return None
    return matches[0] if matches else None


def upsert_transcription(
    db: Session,
    audio_id: str,
    model_id: str,
    text: str,
    bleu_score: Optional[float],
    chrf_score: Optional[float],
) -> Transcription:
    """Insert or overwrite the transcription for ``(audio_id, model_id)``."""
    transcription = (
        db.query(Transcription)
        .filter(Transcription.audio_id == audio_id, Transcription.model_id == model_id)
        .first()
    )
    if transcription is None:
        transcription = Transcription(audio_id=audio_id, model_id=model_id)
        db.add(transcription)
    transcription.text = text
    transcription.bleu_score = bleu_score
    transcription.chrf_score = chrf_score
    transcription.word_count = count_words(text)
    db.commit()
    return transcription


def import_rows(db: Session, rows: List[Mapping], model_id: str) -> ImportResults:
    """Import parsed CSV rows as transcriptions produced by ``model_id``."""
    if db.query(Model).filter(Model.id == model_id).first() is None:
        raise NotFound("Model not found")

    results = ImportResults()
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        audio_name = _lookup(row, AUDIO_NAME_COLUMNS)
        text = _lookup(row, TRANSCRIPTION_COLUMNS)
        if not audio_name or not text:
            continue

        try:
            audio = find_audio(db, audio_name)
            if audio is None:
                results.audio_not_found.append(audio_name)
                continue
            results.processed += 1

            upsert_transcription(
                db,
                audio_id=audio.id,
                model_id=model_id,
                text=text.strip(),
                bleu_score=parse_score(_lookup(row, BLEU_COLUMNS)),
                chrf_score=parse_score(_lookup(row, CHRF_COLUMNS)),
            )
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to import transcription for '%s': %s", audio_name, exc, exc_info=True)
            detail = str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc)
            results.errors.append({"audioName": audio_name, "error": detail})
            continue
        results.transcriptions_added += 1

    logger.info(
        "CSV import for model %s: %d processed, %d added, %d audio not found, %d errors",
        model_id,
        results.processed,
        results.transcriptions_added,
        len(results.audio_not_found),
        len(results.errors),
    )
    return results
