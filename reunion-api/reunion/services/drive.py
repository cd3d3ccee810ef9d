# reunion/services/drive.py
# Google Drive folder listing -> MediaItem list.
#
# Pagination is sequential (page N+1 only after page N). Failure policy:
#   - first page fails            -> UpstreamAPIError (status + provider message)
#   - a later page fails          -> warning, keep what was already fetched
#   - nothing qualifies at the end -> EmptyResultError
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import requests

from reunion.core.errors import ConfigurationError, EmptyResultError, UpstreamAPIError
from reunion.core.logging import get_logger
from reunion.schemas.media import MediaItem
from reunion.utils.thumbs import ThumbnailRewriter, upscale_thumbnail

log = get_logger("drive")

DRIVE_FILES_URL = "https://www.googleapis.com/drive/v3/files"
FILE_FIELDS = (
    "nextPageToken, files(id, name, mimeType, webContentLink, thumbnailLink, "
    "createdTime, size, imageMediaMetadata, videoMediaMetadata)"
)


def build_query(folder_id: str, media_only: bool = False) -> str:
    """Drive `q` for the direct children of a folder (optionally only images/videos)."""
    q = f"'{folder_id}' in parents and trashed=false"
    if media_only:
        q += " and (mimeType contains 'image/' or mimeType contains 'video/')"
    return q


def media_kind(mime_type: Optional[str]) -> Optional[str]:
    """'photo' | 'video' from the MIME prefix; None for anything else."""
    mime_type = mime_type or ""
    if mime_type.startswith("image/"):
        return "photo"
    if mime_type.startswith("video/"):
        return "video"
    return None


def _error_message(resp: requests.Response) -> str:
    """Provider message from a Drive error body, falling back to the reason phrase."""
    try:
        body = resp.json()
    except ValueError:
        return resp.reason or f"HTTP {resp.status_code}"
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return resp.reason or f"HTTP {resp.status_code}"


def iter_pages(session, api_key: str, query: str, page_size: int = 100,
               timeout: float = 30) -> Iterator[Dict[str, Any]]:
    """
    Yield each files.list page body in order, following nextPageToken.
    Raises UpstreamAPIError for any failed page; the caller decides whether
    that is fatal.
    """
    page_token: Optional[str] = None
    while True:
        params = {
            "q": query,
            "fields": FILE_FIELDS,
            "key": api_key,
            "pageSize": page_size,
            "orderBy": "createdTime desc",
        }
        if page_token:
            params["pageToken"] = page_token
        try:
            resp = session.get(DRIVE_FILES_URL, params=params, timeout=timeout)
        except requests.RequestException as e:
            raise UpstreamAPIError(f"Could not reach Google Drive: {e}") from e
        if not resp.ok:
            raise UpstreamAPIError(
                f"Google Drive API Error: {_error_message(resp)}", status=resp.status_code
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamAPIError(f"Google Drive returned invalid JSON: {e}") from e
        yield data
        page_token = data.get("nextPageToken")
        if not page_token:
            return


def to_media_item(f: Dict[str, Any], thumb_size: int = 1200,
                  rewrite_thumb: ThumbnailRewriter = upscale_thumbnail) -> Optional[MediaItem]:
    """Project one Drive file resource onto MediaItem; None when it's not a photo/video."""
    kind = media_kind(f.get("mimeType"))
    if kind is None:
        return None

    meta = (f.get("videoMediaMetadata") if kind == "video" else f.get("imageMediaMetadata")) or {}
    duration = None
    millis = (f.get("videoMediaMetadata") or {}).get("durationMillis")
    if millis not in (None, ""):
        duration = int(int(millis) / 1000 + 0.5)  # half-up, not banker's rounding

    content_url = f.get("webContentLink")
    return MediaItem(
        id=f["id"],
        name=f.get("name", ""),
        content_url=content_url,
        thumbnail_url=rewrite_thumb(f.get("thumbnailLink"), content_url, thumb_size),
        kind=kind,
        mime_type=f["mimeType"],
        created_at=f.get("createdTime"),
        size_bytes=int(f["size"]) if f.get("size") else 0,
        width=meta.get("width"),
        height=meta.get("height"),
        video_duration_seconds=duration,
    )


def fetch_media(api_key: str, folder_id: str, *, session=None, media_only: bool = False,
                page_size: int = 100, thumb_size: int = 1200, timeout: float = 30,
                rewrite_thumb: ThumbnailRewriter = upscale_thumbnail) -> List[MediaItem]:
    """
    Every photo/video directly inside `folder_id`, newest first.
    `session` is anything with a requests-style .get(); a fresh Session is used when omitted.
    """
    if not api_key:
        raise ConfigurationError("Google API key not configured.")
    if not folder_id:
        raise ConfigurationError("Google Drive folder ID not configured.")

    own_session = session is None
    session = session or requests.Session()
    query = build_query(folder_id, media_only)
    log.info("Fetching media from Drive folder %s", folder_id)

    files: List[Dict[str, Any]] = []
    pages = 0
    try:
        for page in iter_pages(session, api_key, query, page_size=page_size, timeout=timeout):
            pages += 1
            batch = page.get("files") or []
            files.extend(batch)
            log.debug("page %d: %d files (running total %d)", pages, len(batch), len(files))
    except UpstreamAPIError as e:
        if pages == 0:
            log.error("Drive listing failed on first page: %s", e.message)
            raise
        log.warning("Drive listing stopped after %d page(s), keeping %d files: %s",
                    pages, len(files), e.message)
    finally:
        if own_session:
            session.close()

    items: List[MediaItem] = []
    seen: set[str] = set()
    for f in files:
        # a file can show up on two pages if the folder changes mid-listing
        if f.get("id") in seen:
            continue
        item = to_media_item(f, thumb_size=thumb_size, rewrite_thumb=rewrite_thumb)
        if item is not None:
            seen.add(item.id)
            items.append(item)

    log.info("Drive: %d files fetched, %d photos/videos", len(files), len(items))
    if not items:
        raise EmptyResultError(
            "No images or videos found in the shared folder. Make sure the folder contains media files."
        )
    return items
