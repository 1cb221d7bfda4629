"""Filesystem & object storage helpers.

Audio blobs live in a bucket directory under ``DATA_ROOT`` and are addressed
by their storage path (e.g. ``uploads/1718000000000_clip.wav``).  Rows in the
database only keep that path and the public URL derived from it.
"""

import logging
import os
import re
import time
from pathlib import Path

from fastapi import UploadFile

from app.config import settings
from app.exceptions import StorageError

logger = logging.getLogger(__name__)

# Determine base data directory:
# 1. Use DATA_ROOT env var if set.
# 2. Else, if /data exists, assume Docker environment and use /data.
# 3. Otherwise, use project_root/data (development environment).
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_DATA_ROOT = os.getenv("DATA_ROOT")
if _ENV_DATA_ROOT:
    DATA_ROOT = Path(_ENV_DATA_ROOT)
elif Path("/data").exists():
    DATA_ROOT = Path("/data")
else:
    DATA_ROOT = _PROJECT_ROOT / "data"

BUCKET_DIR = DATA_ROOT / settings.STORAGE_BUCKET
UPLOAD_PREFIX = "uploads"

CHUNK_SIZE = 8192

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


class ObjectTooLarge(StorageError):
    status_code = 413


def ensure_dir_exists(path: Path) -> Path:
    """Ensure that the given directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_filename(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9.-]`` with an underscore."""
    return _UNSAFE_CHARS.sub("_", name)


def build_storage_path(filename: str, timestamp_ms: int | None = None) -> str:
    """Return the timestamp-prefixed key an upload is stored under."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{UPLOAD_PREFIX}/{timestamp_ms}_{sanitize_filename(filename)}"


def public_url(storage_path: str) -> str:
    return f"{settings.PUBLIC_BASE_URL}/api/media/{storage_path}"


def resolve_object(storage_path: str) -> Path:
    """Map a storage path to a file inside the bucket, refusing anything outside it."""
    bucket = BUCKET_DIR.resolve()
    candidate = (bucket / storage_path).resolve()
    if candidate == bucket or bucket not in candidate.parents:
        raise StorageError(f"Invalid storage path: {storage_path}", status_code=400)
    return candidate


async def save_object(storage_path: str, upload: UploadFile, max_bytes: int = 0) -> int:
    """Stream ``upload`` into the bucket and return the number of bytes written.

    The object must not exist yet.  A partially written object is removed
    before the error propagates.
    """
    target = resolve_object(storage_path)
    ensure_dir_exists(target.parent)
    bytes_written = 0
    try:
        with open(target, "xb") as f:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                bytes_written += len(chunk)
                # 0 == unlimited
                if max_bytes and bytes_written > max_bytes:
                    raise ObjectTooLarge(
                        f"File '{upload.filename}' exceeds the maximum allowed size of {settings.MAX_UPLOAD_SIZE_MB} MB."
                    )
                f.write(chunk)
    except FileExistsError:
        raise StorageError(f"The resource already exists: {storage_path}")
    except StorageError:
        target.unlink(missing_ok=True)
        raise
    except OSError as exc:
        target.unlink(missing_ok=True)
        raise StorageError(f"Could not write {storage_path}: {exc}") from exc
    logger.info("Stored object %s (%d bytes)", storage_path, bytes_written)
    return bytes_written


def remove_object(storage_path: str) -> None:
    """Delete an object from the bucket; a missing object is not an error."""
    target = resolve_object(storage_path)
    try:
        target.unlink(missing_ok=True)
    except OSError as exc:
        raise StorageError(f"Could not remove {storage_path}: {exc}") from exc
    logger.info("Removed object %s", storage_path)
