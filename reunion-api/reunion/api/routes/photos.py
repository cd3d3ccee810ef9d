# reunion/api/routes/photos.py
# GET /api/photos: gallery feed from the shared Drive folder.
# Guards run in order: rate limit -> origin -> config; then fetch + view (filter/shuffle/page).
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse

from reunion.api.deps import get_rate_limiter, get_session
from reunion.core.config import Settings, get_settings
from reunion.core.errors import RateLimitExceeded, ReunionError, UpstreamAPIError
from reunion.core.logging import get_logger
from reunion.schemas.media import PhotosResponse
from reunion.services.drive import fetch_media
from reunion.services.gallery import filter_media, paginate, shuffle_media
from reunion.utils.http import client_identifier, origin_allowed
from reunion.utils.ratelimit import RateLimitStore

api_router = APIRouter(tags=["photos"])     # mounted under /api in main
log = get_logger("api.photos")

_DRIVE_HINTS = {
    403: 'Access Denied: Make sure (1) your folder is publicly shared, (2) your Google API key has '
         '"Google Drive API" enabled, and (3) the folder ID is correct.',
    404: "Folder Not Found: Please verify your GOOGLE_DRIVE_FOLDER_ID is correct.",
}


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status)


@api_router.get("/photos", response_model=PhotosResponse, response_model_exclude_none=True)
def list_photos(
    request: Request,
    response: Response,
    kind: str = Query("all", alias="type"),
    q: Optional[str] = None,
    shuffle: bool = False,
    seed: Optional[int] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    settings: Settings = Depends(get_settings),
    limiter: RateLimitStore = Depends(get_rate_limiter),
    session=Depends(get_session),
):
    if not limiter.check_and_increment(client_identifier(request), time.time()):
        err = RateLimitExceeded()
        return _error(err.status_code, err.message)

    origin = request.headers.get("origin", "")
    if not origin_allowed(origin, settings.allowed_origins):
        log.warning("Unauthorized origin: %s", origin)
        return _error(403, "Unauthorized access")

    # validate view params
    if kind not in ("all", "photo", "video"):
        raise HTTPException(400, "type must be one of: all, photo, video")
    if limit is not None and not (1 <= limit <= 1000):
        raise HTTPException(400, "limit must be 1..1000")
    if offset < 0:
        raise HTTPException(400, "offset must be >= 0")

    try:
        items = fetch_media(
            settings.api_key, settings.drive_folder_id,
            session=session,
            media_only=settings.media_only,
            page_size=settings.page_size,
            thumb_size=settings.thumb_size,
            timeout=settings.timeout,
        )
    except UpstreamAPIError as e:
        return _error(e.status_code, _DRIVE_HINTS.get(e.status, e.message))
    except ReunionError as e:
        return _error(e.status_code, e.message)
    except Exception as e:
        log.exception("Unexpected error listing photos")
        return _error(500, f"Unexpected error: {e}")

    view = filter_media(items, kind, q)
    if shuffle:
        view = shuffle_media(view, seed)
    page, has_more = paginate(view, offset, limit)

    response.headers["Cache-Control"] = settings.cache_control["photos"]
    return PhotosResponse(files=page, total=len(view), has_more=has_more)
