"""CSV transcription import.

* `POST /import-csv`      – JSON ``{rows, modelId}`` parsed in the browser.
* `POST /import-csv/file` – raw CSV upload plus ``modelId`` form field.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel

from ..db.database import SessionLocal
from ..services.csv_import import detect_columns, import_rows, parse_csv

router = APIRouter()
logger = logging.getLogger(__name__)


class ImportPayload(BaseModel):
    rows: Optional[Any] = None
    modelId: Optional[str] = None


def _run_import(rows: list, model_id: str) -> dict:
    db = SessionLocal()
    try:
        results = import_rows(db, rows, model_id)
    finally:
        db.close()
    return results.as_dict()


@router.post("")
async def import_csv(payload: ImportPayload) -> dict:
    if not payload.rows or not isinstance(payload.rows, list):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid CSV data provided")
    if not payload.modelId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Model ID is required")

    logger.info("Importing %d CSV rows for model %s", len(payload.rows), payload.modelId)
    return {"message": "CSV import completed", "results": _run_import(payload.rows, payload.modelId)}


@router.post("/file")
async def import_csv_file(
    file: Optional[UploadFile] = File(None),
    modelId: Optional[str] = Form(None),
) -> dict:
    """Parse an uploaded CSV on the server and import it like ``POST /import-csv``."""
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No CSV file provided")
    if not modelId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Model ID is required")

    columns, rows = parse_csv(await file.read())
    detected = detect_columns(columns)
    missing = [name for name, found in detected.items() if not found]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required column(s): {', '.join(missing)}",
        )
    if not rows:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid CSV data provided")

    logger.info("Importing CSV file '%s' (%d rows) for model %s", file.filename, len(rows), modelId)
    return {
        "message": "CSV import completed",
        "columns": columns,
        "detected": detected,
        "results": _run_import(rows, modelId),
    }
