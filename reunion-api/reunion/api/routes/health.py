# reunion/api/routes/health.py
from fastapi import APIRouter, Depends

from reunion.core.config import Settings, get_settings

api_router = APIRouter(tags=["health"])


@api_router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    """Liveness + which upstream identifiers are configured (values never echoed)."""
    return {
        "status": "ok",
        "configured": {
            "drive": bool(settings.api_key and settings.drive_folder_id),
            "sheet": bool(settings.sheet_id),
        },
        "missing": settings.missing(),
    }
