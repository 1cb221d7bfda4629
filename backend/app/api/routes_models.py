"""Admin CRUD over transcription models."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError

from ..db.database import SessionLocal
from ..models.model import Model, ModelDetail, ModelInfo

router = APIRouter()
logger = logging.getLogger(__name__)


class ModelPayload(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: Optional[str] = None
    description: Optional[str] = None


def _require_name(name: Optional[str]) -> str:
    if not name or not name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Model name is required")
    return name.strip()


@router.get("", response_model=List[ModelInfo])
async def list_models() -> List[ModelInfo]:
    """Return every model ordered by name."""
    db = SessionLocal()
    try:
        models = db.query(Model).order_by(Model.model_name).all()
        return [ModelInfo.model_validate(m) for m in models]
    except SQLAlchemyError as exc:
        logger.error("Failed to list models: %s", exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch models")
    finally:
        db.close()


@router.post("", response_model=ModelDetail)
async def create_model(payload: ModelPayload) -> ModelDetail:
    name = _require_name(payload.model_name)
    db = SessionLocal()
    try:
        model = Model(model_name=name, description=payload.description)
        db.add(model)
        db.commit()
        db.refresh(model)
        logger.info("Created model '%s' (%s)", model.model_name, model.id)
        return ModelDetail.model_validate(model)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create model '%s': %s", name, exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()


@router.patch("/{model_id}", response_model=ModelDetail)
async def update_model(model_id: str, payload: ModelPayload) -> ModelDetail:
    changes = payload.model_dump(exclude_unset=True)
    if "model_name" in changes:
        changes["model_name"] = _require_name(changes["model_name"])

    db = SessionLocal()
    try:
        model = db.query(Model).filter(Model.id == model_id).first()
        if not model:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Model not found")
        for key, value in changes.items():
            setattr(model, key, value)
        db.commit()
        db.refresh(model)
        logger.info("Updated model %s: %s", model_id, sorted(changes))
        return ModelDetail.model_validate(model)
    except HTTPException:
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to update model %s: %s", model_id, exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()


@router.delete("/{model_id}")
async def delete_model(model_id: str) -> dict:
    """Delete a model; its transcriptions go with it through the foreign key."""
    db = SessionLocal()
    try:
        model = db.query(Model).filter(Model.id == model_id).first()
        if not model:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Model not found")
        db.delete(model)
        db.commit()
        logger.info("Deleted model %s", model_id)
        return {"success": True}
    except HTTPException:
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete model %s: %s", model_id, exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    finally:
        db.close()
