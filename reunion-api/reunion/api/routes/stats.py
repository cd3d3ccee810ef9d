# reunion/api/routes/stats.py
# GET /api/stats: landing-page counters; zeros + success=false if contacts can't be read.
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from reunion.api.deps import get_session
from reunion.core.config import Settings, get_settings
from reunion.core.errors import ConfigurationError
from reunion.core.logging import get_logger
from reunion.schemas.media import StatsResponse, StatsSnapshot
from reunion.services.drive import fetch_media
from reunion.services.sheets import fetch_contacts
from reunion.services.stats import build_stats

api_router = APIRouter(tags=["stats"])
log = get_logger("api.stats")


def _degraded(error: str) -> JSONResponse:
    body = StatsResponse(success=False, stats=StatsSnapshot(), error=error)
    return JSONResponse(body.model_dump(by_alias=True), status_code=500)


@api_router.get("/stats", response_model=StatsResponse, response_model_exclude_none=True)
def get_stats(
    response: Response,
    settings: Settings = Depends(get_settings),
    session=Depends(get_session),
    # the two fetches run on separate threads; each gets its own session
    media_session=Depends(get_session, use_cache=False),
):
    try:
        stats = build_stats(
            lambda: fetch_contacts(settings.sheet_id, session=session, timeout=settings.timeout),
            lambda: fetch_media(
                settings.api_key, settings.drive_folder_id,
                session=media_session,
                media_only=settings.media_only,
                page_size=settings.page_size,
                thumb_size=settings.thumb_size,
                timeout=settings.timeout,
            ),
        )
    except ConfigurationError as e:
        log.error("Stats unavailable: %s", e.message)
        return _degraded(e.message)
    except Exception:
        log.exception("Stats API error")
        return _degraded("Failed to fetch stats")

    response.headers["Cache-Control"] = settings.cache_control["stats"]
    return StatsResponse(success=True, stats=stats)
