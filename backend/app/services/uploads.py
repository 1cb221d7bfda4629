"""Audio upload pipeline: allow-list check, bucket write, row insert.

Each file is handled on its own.  The storage write and the database insert
are not covered by one transaction; when the insert fails the stored object
is deleted again so no orphan is left behind.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import StorageError
from app.models.audio import Audio
from app.utils.storage import build_storage_path, public_url, remove_object, save_object

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = ("audio/wav", "audio/mpeg", "audio/mp3", "audio/x-wav")


@dataclass
class UploadReport:
    success: List[str] = field(default_factory=list)
    failed: List[Dict[str, str]] = field(default_factory=list)

    def fail(self, name: str, error: str) -> None:
        self.failed.append({"name": name, "error": error})

    def as_dict(self) -> dict:
        return {"success": self.success, "failed": self.failed}


def _insert_audio_row(db: Session, **fields) -> Audio:
    audio = Audio(**fields)
    db.add(audio)
    db.commit()
    db.refresh(audio)
    return audio


async def store_audio_file(db: Session, upload: UploadFile, report: UploadReport) -> None:
    """Validate, store and register a single uploaded file, recording the outcome in ``report``."""
    name = upload.filename or ""
    content_type = upload.content_type or ""

    if content_type not in ALLOWED_MIME_TYPES:
        logger.warning("Upload rejected: '%s' has unsupported type '%s'", name, content_type)
        report.fail(name, f"Invalid file type: {content_type}. Only .wav and .mp3 are allowed.")
        return

    storage_path = build_storage_path(name)
    try:
        size = await save_object(storage_path, upload, max_bytes=settings.max_upload_size_bytes)
    except StorageError as exc:
        logger.error("Storage write failed for '%s' at '%s': %s", name, storage_path, exc.detail)
        report.fail(name, exc.detail)
        return

    try:
        _insert_audio_row(
            db,
            audio_name=name,
            storage_url=public_url(storage_path),
            storage_path=storage_path,
            mime_type=content_type,
            file_size_bytes=size,
            language_tag=settings.DEFAULT_LANGUAGE_TAG,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Audio insert failed for '%s', removing %s: %s", name, storage_path, exc, exc_info=True)
        try:
            remove_object(storage_path)
        except StorageError as cleanup_err:
            logger.error("Failed to clean up stored object %s: %s", storage_path, cleanup_err.detail)
        report.fail(name, str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc))
        return

    logger.info("Uploaded '%s' to '%s'", name, storage_path)
    report.success.append(name)


async def store_audio_files(db: Session, uploads: List[UploadFile]) -> UploadReport:
    report = UploadReport()
    for upload in uploads:
        await store_audio_file(db, upload, report)
    return report
