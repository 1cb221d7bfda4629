# Router aggregator – import each route module here and expose ``api_router``
# for convenient inclusion in the FastAPI app.

from fastapi import APIRouter

from . import (
    routes_audio,
    routes_feedback,
    routes_import,
    routes_media,
    routes_models,
    routes_stats,
    routes_upload,
)


api_router = APIRouter()
api_router.include_router(routes_models.router, prefix="/models", tags=["models"])
api_router.include_router(routes_upload.router, prefix="/upload", tags=["upload"])
api_router.include_router(routes_audio.router, prefix="/audio", tags=["audio"])
api_router.include_router(routes_import.router, prefix="/import-csv", tags=["import"])
api_router.include_router(routes_feedback.router, prefix="/feedback", tags=["feedback"])
api_router.include_router(routes_media.router, prefix="/media", tags=["media"])
api_router.include_router(routes_stats.router, tags=["stats"])
